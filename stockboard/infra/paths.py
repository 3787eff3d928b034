from stockboard.utilities.config import DATA_DIR, SNAPSHOT_FILE

# Centralized paths for data files (single source of truth)
__all__ = ['DATA_DIR', 'SNAPSHOT_FILE']
