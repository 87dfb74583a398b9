"""
Competence Gateway - User-facing Messages
=========================================

Fixed texts returned to the frontend. The frontend compares against these
strings, so they are part of the API contract.
"""

INVALID_JSON = "The request body is not valid JSON."
INVALID_JSON_OBJECT = "The JSON object in the request was omitted or is invalid."
NO_SUCH_ITEM = "No item with the given id was found."
SUCCESS_UPDATE = "The item was successfully updated."
SUCCESS_DELETE = "The item was successfully removed."

# Downstream failures, keyed by the operation that produced them
ITEM_NOT_SAVED = "The item could not be saved."
ITEMS_NOT_FETCHED = "The item/items could not be fetched."
ITEM_NOT_REMOVED = "The item could not be removed."
INVALID_RESPONSE_CODE = "Not a valid response code."
INVALID_RESPONSE_BODY = "The downstream API returned a malformed body."
