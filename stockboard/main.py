import logging

import uvicorn
from stockboard.api.api_run import app
from stockboard.utilities.config import APP_HOST, APP_PORT, LOG_LEVEL
from stockboard.utilities.network import server_urls


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    local_url, lan_url = server_urls(APP_PORT)
    print(f"StockBoard API on {local_url} (Press CTRL+C to quit)")
    # peers on the same network share boards through this address
    if lan_url:
        print(f"Reachable from other devices at: {lan_url}")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)


if __name__ == "__main__":
    main()
