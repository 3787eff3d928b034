from fastapi import FastAPI, Depends, Query
from concurrent.futures import ThreadPoolExecutor
from typing import Optional
import logging

from stockboard.api.dependencies import get_store, get_drag
from stockboard.api.routes import boards, cards
from stockboard.events.Event_Bus import GLOBAL_EVENT_BUS, BOARD_CHANGED, STORE_CHANGED
from stockboard.events.web_observers import start as start_event_observers, get_events as get_web_events
from stockboard.infra.Sheets_Repository import SheetsRepository
from stockboard.infra.Snapshot_Repository import SnapshotRepository
from stockboard.infra.peer_share import PeerShare
from stockboard.infra.sheets_sync import SheetsSync
from stockboard.logic.grouping.view import build_grouped_view
from stockboard.logic.ordering.drag import DragController
from stockboard.logic.store.board_store import BoardStore
from stockboard.utilities.config import PEER_ID, SPREADSHEET_ID, SHEETS_ACCESS_TOKEN
from stockboard.utilities.validators import ViewModeInput, DragStartInput, DragOverInput, DragEndInput

# Logging
logger = logging.getLogger("stockboard_app")


def _state_response(store: BoardStore):
    state = store.state
    data = state.to_dict()
    data["currentBoard"] = state.current_board.to_dict() if state.current_board else None
    data["groups"] = [g.to_dict() for g in build_grouped_view(state)]
    return data


def _wire_persistence(app: FastAPI):
    """Load the snapshot and hook persistence observers onto the global bus."""
    repo = SnapshotRepository()
    store = BoardStore(repo.load(), bus=GLOBAL_EVENT_BUS)
    GLOBAL_EVENT_BUS.subscribe(BOARD_CHANGED, repo.handle_event)
    GLOBAL_EVENT_BUS.subscribe(STORE_CHANGED, repo.handle_event)
    app.state.store = store
    app.state.drag = DragController(store)
    app.state.peers = PeerShare(store, PEER_ID).start()
    logger.info("Loaded %d boards from %s", len(store.state.boards), repo.path)

    if SPREADSHEET_ID and SHEETS_ACCESS_TOKEN:
        # one worker keeps sheet writes in commit order
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sheets-sync")
        sheets = SheetsRepository(SPREADSHEET_ID, SHEETS_ACCESS_TOKEN)
        app.state.sheets_sync = SheetsSync(sheets, bus=GLOBAL_EVENT_BUS, executor=executor).start()
        app.state.sheets_executor = executor
        logger.info("Spreadsheet sync enabled for %s", SPREADSHEET_ID)
    else:
        logger.info("Spreadsheet sync disabled (SPREADSHEET_ID / SHEETS_ACCESS_TOKEN not set)")


def create_app(store: Optional[BoardStore] = None) -> FastAPI:
    """Build the API. With `store` given nothing is loaded from or written to disk."""
    app = FastAPI(title="StockBoard API")
    app.include_router(boards.router)
    app.include_router(cards.router)

    if store is not None:
        app.state.store = store
        app.state.drag = DragController(store)
        app.state.peers = PeerShare(store, PEER_ID).start()
        start_event_observers(store.bus)

    @app.on_event("startup")
    def _startup():
        if store is None:
            _wire_persistence(app)
        try:
            start_event_observers(app.state.store.bus)
            logger.info("Web observers for board events started")
        except Exception as e:  # pragma: no cover
            logger.error("Failed to start web observers: %s", e)

    @app.on_event("shutdown")
    def _shutdown():
        app.state.peers.close_all()
        executor = getattr(app.state, "sheets_executor", None)
        if executor is not None:
            executor.shutdown(wait=True)
            app.state.sheets_sync.repository.close()

    @app.get("/api/state")
    def get_state(store: BoardStore = Depends(get_store)):
        return _state_response(store)

    @app.put("/api/view-mode")
    def set_view_mode(body: ViewModeInput, store: BoardStore = Depends(get_store)):
        store.set_view_mode(body.mode)
        return _state_response(store)

    @app.post("/api/board-list/toggle")
    def toggle_board_list(store: BoardStore = Depends(get_store)):
        return {"isBoardListVisible": store.toggle_board_list().board_list_visible}

    @app.post("/api/board-list/toggle-expanded")
    def toggle_board_list_expanded(store: BoardStore = Depends(get_store)):
        return {"isBoardListExpanded": store.toggle_board_list_expanded().board_list_expanded}

    # -------------------- DRAG & DROP --------------------
    @app.post("/api/drag/start")
    def drag_start(body: DragStartInput, drag: DragController = Depends(get_drag)):
        return {"accepted": drag.drag_start(body.active_id), "activeGroup": drag.active_group}

    @app.post("/api/drag/over")
    def drag_over(body: DragOverInput, drag: DragController = Depends(get_drag),
                  store: BoardStore = Depends(get_store)):
        moved = drag.drag_over(body.active_id, body.over_id, over_kind=body.over_kind)
        return {"moved": moved, "activeGroup": drag.active_group, "state": _state_response(store)}

    @app.post("/api/drag/end")
    def drag_end(body: DragEndInput, drag: DragController = Depends(get_drag),
                 store: BoardStore = Depends(get_store)):
        committed = drag.drag_end(body.active_id, body.over_id, kind=body.kind, over_kind=body.over_kind)
        return {"committed": committed, "state": _state_response(store)}

    # -------------------- EVENTS --------------------
    @app.get("/api/events")
    def events(since: Optional[int] = Query(default=None), board_id: Optional[str] = Query(default=None)):
        return get_web_events(since, board_id)

    return app


app = create_app()
