"""
Access Control List Configuration
Static table of backoffice screens, the roles allowed to open them and how
they appear in the sidebar. Read by the page guard, the navigation endpoint
and the API dependencies that gate each resource by the screen that uses it.
"""

# Roles that grant backoffice navigation
SUPER_ADMIN = "super_admin"
BRAND = "brand"
CEP = "cep"

USER_ROLES = (SUPER_ADMIN, BRAND, CEP)

# Every role a profile row may carry. "admin" and "expert" are assigned at
# registration and by the users screen but are not navigation roles.
PROFILE_ROLES = (SUPER_ADMIN, BRAND, CEP, "admin", "expert")

GOOGLE_ANALYTICS_URL = (
    "https://analytics.google.com/analytics/web/?hl=it#/p498367036/reports/intelligenthome"
)

# Order matters: lookups take the first matching entry and the sidebar
# renders entries in this order.
ROUTE_PERMISSIONS = [
    {
        "path": "/cover",
        "label": "Cover",
        "icon": "image",
        "allowed_roles": [SUPER_ADMIN],
        "position": "top",
    },
    {
        "path": "/categories",
        "label": "Categories",
        "icon": "folder-tree",
        "allowed_roles": [SUPER_ADMIN],
        "position": "top",
    },
    {
        "path": "/selling-links",
        "label": "Selling Links",
        "icon": "link",
        "allowed_roles": [SUPER_ADMIN],
        "position": "top",
    },
    {
        "path": "/users",
        "label": "Gestione Utenti",
        "icon": "users",
        "allowed_roles": [SUPER_ADMIN],
        "position": "top",
    },
    {
        "path": GOOGLE_ANALYTICS_URL,
        "label": "Google Analytics",
        "icon": "bar-chart",
        "allowed_roles": [SUPER_ADMIN],
        "position": "top",
        "external": True,
    },
    {
        "path": "/brand/products",
        "label": "Prodotti",
        "icon": "package",
        "allowed_roles": [BRAND],
        "position": "top",
    },
    {
        "path": "/brand/links",
        "label": "Link",
        "icon": "link",
        "allowed_roles": [BRAND],
        "position": "top",
    },
    {
        "path": "/profile",
        "label": "Profilo",
        "icon": "user",
        "allowed_roles": [SUPER_ADMIN, BRAND, CEP],
        "position": "bottom",
    },
    {
        "path": "/logout",
        "label": "Logout",
        "icon": "log-out",
        "allowed_roles": [SUPER_ADMIN, BRAND, CEP],
        "position": "bottom",
    },
]

# Routes that never require authentication
PUBLIC_ROUTES = ["/", "/login", "/register", "/reset-password", "/auth/callback"]

# Landing page after login, for every role
DEFAULT_ROUTE = "/profile"

LOGIN_ROUTE = "/login"
