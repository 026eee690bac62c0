"""Selectors and shared constants for the storefront page objects."""

import re

# Common primitives
CART_MODAL = "#cartModal"
ANY_VISIBLE_MODAL = "#cartModal, .modal:visible"
MODAL_CONTAINER = "#cartModal, .modal:visible"
MODAL_DISMISS_NAME = re.compile(r"continue shopping|close", re.IGNORECASE)
HEADER = "#header"
FEATURES_ITEMS_CARD = ".features_items .product-image-wrapper"

# Product
PRODUCT_NAME_IN_CARD = ".single-products .productinfo p"
ADD_TO_CART_IN_CARD = "a.add-to-cart"
OVERLAY_ADD_IN_CARD = ".product-overlay a.add-to-cart, .overlay-content a.add-to-cart"
INFO_ADD_IN_CARD = ".productinfo a.add-to-cart"
ADD_TO_CART_NAME = re.compile(r"add to cart", re.IGNORECASE)

# Search
SEARCH_INPUT = "#search_product"
SEARCH_INPUT_FALLBACK = 'input[name="search"]'
SEARCH_BUTTON = "#submit_search"

# Cart
CART_TABLE = "#cart_info_table"
CART_DELETE_IN_ROW = "a.cart_quantity_delete"
CART_DELETE_BUTTONS = f"#cart_info_table {CART_DELETE_IN_ROW}"
CART_PRODUCT_NAME = "td.cart_description :is(h4 a, a, p)"
CHECKOUT_FALLBACK = "a.check_out"
CHECKOUT_LOGIN_MODAL = '#checkoutModal, .modal:has-text("Register / Login"), .modal:has-text("login")'

# Payment
NAME_ON_CARD = '[data-qa="name-on-card"]'
CARD_NUMBER = '[data-qa="card-number"]'
CVC = '[data-qa="cvc"]'
EXPIRY_MONTH = '[data-qa="expiry-month"]'
EXPIRY_YEAR = '[data-qa="expiry-year"]'
PAY_BUTTON = '[data-qa="pay-button"]'
PLACE_ORDER_NAME = re.compile(r"place order", re.IGNORECASE)
ORDER_PLACED_TEXT = "Order Placed!"

# Left menu / panels
PANELS = ".panel.panel-default"
PANEL_TITLE = ".panel-title"
PANEL_TITLE_LINK = ".panel-title a"
PANEL_COLLAPSE = ".panel-collapse"
BRANDS_LINKS = ".brands_products a"

# Auth
LOGIN_EMAIL = '[data-qa="login-email"]'
LOGIN_PASSWORD = '[data-qa="login-password"]'
LOGIN_BUTTON = '[data-qa="login-button"]'
SIGNUP_NAME = '[data-qa="signup-name"]'
SIGNUP_EMAIL = '[data-qa="signup-email"]'
SIGNUP_BUTTON = '[data-qa="signup-button"]'
ACCOUNT_PASSWORD = '[data-qa="password"]'
TITLE_MR_RADIO = "#id_gender1"
TITLE_MR_LABEL = 'label[for="id_gender1"]'
DAY_SELECT = '[data-qa="days"]'
MONTH_SELECT = '[data-qa="months"]'
YEAR_SELECT = '[data-qa="years"]'
NEWSLETTER_CHECKBOX = "#newsletter"
OFFERS_CHECKBOX = "#optin"
FIRST_NAME = '[data-qa="first_name"]'
LAST_NAME = '[data-qa="last_name"]'
ADDRESS1 = '[data-qa="address"]'
COUNTRY = '[data-qa="country"]'
STATE = '[data-qa="state"]'
CITY = '[data-qa="city"]'
ZIPCODE = '[data-qa="zipcode"]'
MOBILE = '[data-qa="mobile_number"]'
CREATE_ACCOUNT = '[data-qa="create-account"]'
CONTINUE_BUTTON = '[data-qa="continue-button"]'

# URL shapes
CHECKOUT_OR_PAYMENT_URL_RE = re.compile(r"/(checkout|payment)\b", re.IGNORECASE)
CHECKOUT_OUTCOME_URL_RE = re.compile(r"/(checkout|login|signup)\b", re.IGNORECASE)
AUTH_URL_RE = re.compile(r"/(login|signup)\b", re.IGNORECASE)
CHECKOUT_URL_RE = re.compile(r"/checkout\b", re.IGNORECASE)
VIEW_CART_URL_RE = re.compile(r"/view_cart", re.IGNORECASE)

# Ad networks blocked at the routing layer.
AD_DOMAINS = (
    "googlesyndication.com",
    "doubleclick.net",
    "adservice.google.com",
    "googleads.g.doubleclick.net",
    "adnxs.com",
    "taboola.com",
    "outbrain.com",
)

AD_GUARD_CSS = """
iframe[id*="google_ads"], iframe[src*="ads"],
#aswift_0, [id^="google_ads_iframe"], .advertisement,
ins.adsbygoogle, .adsbygoogle, .google-auto-placed {
  pointer-events: none !important;
  user-select: none !important;
}
ins.adsbygoogle, .adsbygoogle, .google-auto-placed {
  display: none !important;
  visibility: hidden !important;
}
"""


def brand_link(brand_name: str) -> str:
    return f'{BRANDS_LINKS}:has-text("{brand_name}")'
