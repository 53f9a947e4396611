CATEGORIES = {
    "ELECTRONICS": "Electronics",
    "FASHION": "Fashion",
    "HOME": "Home & Kitchen",
    "SPORTS": "Sports",
    "BEAUTY": "Beauty",
}

# ключи хранилища: по одному снимку на store
KEY_CART = "cart"
KEY_WISHLIST = "wishlist"
KEY_HISTORY = "history"
KEY_SESSION = "session"

STORAGE_KEYS = (KEY_CART, KEY_WISHLIST, KEY_HISTORY, KEY_SESSION)

ORDER_PROCESSING = "Processing"
ORDER_SHIPPED = "Shipped"
ORDER_DELIVERED = "Delivered"

ORDER_STATUSES = (ORDER_PROCESSING, ORDER_SHIPPED, ORDER_DELIVERED)

SORT_NEWEST = "newest"
SORT_PRICE_LOW = "low"
SORT_PRICE_HIGH = "high"

HISTORY_LIMIT = 10
