SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_DIRECTIONS = (SORT_ASC, SORT_DESC)

INVENTORY_BACKENDS = ("database", "memory")

DEFAULT_LOW_STOCK_THRESHOLD = 5
DEFAULT_MIN_STOCK_COUNT = 1

OPEN_PURCHASE_STATUSES = ("draft", "ordered")
FINAL_PURCHASE_STATUSES = ("received", "cancelled")

MOVE_DIRECTIONS = ("up", "down")

ANONYMOUS_SENDER = "Anonymous"
