SUBJECT_COLUMN = "subject_id"
ITEM_COLUMN = "item_id"
PREDICTOR_COLUMN = "predictor"
RESPONSE_COLUMN = "response"

PANEL_COLUMNS = (
    SUBJECT_COLUMN,
    ITEM_COLUMN,
    PREDICTOR_COLUMN,
    RESPONSE_COLUMN,
)

SUBJECT_PREFIX = "S"
ITEM_PREFIX = "I"
