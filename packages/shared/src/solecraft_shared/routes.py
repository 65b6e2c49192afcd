"""Route and endpoint constants.

Single source of truth for the page paths the gateway navigates to and the
API paths it calls. Both the Response Guardian (which decides when to redirect)
and the API wrappers (which issue the requests) reference these.
"""

# Pages (client-side routes)
HOME_PATH = "/"
LOGIN_PATH = "/login"
REGISTER_PATH = "/register"
FORGOT_PASSWORD_PATH = "/forgot-password"
SESSION_EXPIRED_PATH = f"{LOGIN_PATH}?error=session_expired"

# Pages where a 401 must not trigger another redirect
AUTH_PAGES = (LOGIN_PATH, REGISTER_PATH, FORGOT_PASSWORD_PATH)

# Auth API
AUTH_LOGIN = "/api/auth/login"
AUTH_REGISTER = "/api/auth/register"
AUTH_VERIFY = "/api/auth/verify"
AUTH_PROFILE = "/api/auth/profile"
AUTH_FORGOT_PASSWORD = "/api/auth/forgot-password"

# Storefront API
SERVICES = "/api/services"
COBBLERS = "/api/cobblers"
PRODUCTS = "/api/products"
PRODUCT_BRANDS = "/api/products/filters/brands"
PRODUCT_CATEGORIES = "/api/products/filters/categories"
SHOP_STATS = "/api/shop/stats"
CART = "/api/cart"
WISHLIST = "/api/product-wishlist"

# Best-effort reads. Transport failures here never escalate globally
SILENT_ENDPOINTS = (
    AUTH_VERIFY,
    AUTH_PROFILE,
    SHOP_STATS,
    "/api/products/filters",
    WISHLIST,
    CART,
)

# Persisted state keys
TOKEN_KEY = "token"
USER_KEY = "user"
