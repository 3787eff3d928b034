from typing import Final

# Sparse ranks: moved cards land on multiples of ORDER_SPACING, groups on bands of GROUP_BAND
ORDER_SPACING: Final[int] = 10
GROUP_BAND: Final[int] = 1000

DEFAULT_CREATED_BY: Final[str] = "user"

# Local snapshot envelope
SNAPSHOT_VERSION: Final[int] = 2

# Spreadsheet layout
SHEET_TITLE: Final[str] = "Cards"
SPREADSHEET_TITLE: Final[str] = "Stock Management App Data"
SHEET_HEADER: Final[list[str]] = ["ID", "Name", "Category", "Store", "Checked", "Order"]
SHEET_ROW_COUNT: Final[int] = 1000

# Peer channel message types
REQUEST_BOARD: Final[str] = "REQUEST_BOARD"
BOARD_UPDATE: Final[str] = "BOARD_UPDATE"
