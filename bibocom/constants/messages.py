class Messages:
    """User-facing texts shown by the controllers."""

    GENERIC_ERROR = "Something went wrong. Please try again."
    AUTH_REQUIRED = "You must be logged in to continue."

    # Messaging
    LOAD_CONVERSATIONS_FAILED = "Could not load your conversations."
    LOAD_MESSAGES_FAILED = "Could not load the messages."
    SEND_FAILED = "Could not send the message. Please try again."
    EMPTY_MESSAGE = "The message cannot be empty."
    EDIT_FAILED = "Could not update the message."
    EDIT_SAVED_LOCALLY = (
        "Could not update the message on the server. The change is kept locally."
    )
    DELETE_FAILED = "Could not delete the message."
    DELETE_FORBIDDEN = "You are not authorized to delete this message for everyone."
    DELETE_APPLIED_LOCALLY = (
        "Could not delete the message on the server. It is removed locally."
    )
    MEDIA_TOO_LARGE = "The file is too large. Maximum size: {max_mb} MB."
    MEDIA_UNSUPPORTED_TYPE = "Only images and videos are accepted."
    MEDIA_UNREADABLE = "The selected file could not be read."
    MEDIA_LABEL = "📎 Media"

    # Cart
    LOAD_CART_FAILED = "Could not load the cart. Please try again."
    UPDATE_CART_FAILED = "Could not update the cart. Please try again."
    REMOVE_ITEM_FAILED = "Could not remove the item. Please try again."
    CLEAR_CART_FAILED = "Could not empty the cart. Please try again."
    ADD_ITEM_FAILED = "Could not add the product to the cart."
    EMPTY_CART_SHARE = (
        "Your cart is empty. Add items before contacting a seller."
    )
    EMPTY_CART_ORDER = "Your cart is empty. Add items before placing an order."
    SHARE_FAILED = "Could not share the cart. Please try again."
    INVALID_SHARE_RESPONSE = "Invalid response format for WhatsApp links."
    ORDER_PLACED = "Your order was created successfully!"
    ORDER_FAILED = "Could not create the order. Please try again."
    PROMO_EMPTY = "Please enter a promo code."
    PROMO_INVALID = "Invalid promo code."
    PROMO_APPLIED = "Promo code {code} applied successfully!"

    # Orders
    LOAD_ORDERS_FAILED = "Could not load the orders."
    UPDATE_ORDER_STATUS_FAILED = "Could not update the order status."
