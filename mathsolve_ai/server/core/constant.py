"""
Server-wide constants.

Values here are fixed by the API contract and do not vary per deployment;
anything tunable lives in ``config.Settings``.
"""

PROJECT_NAME = "MathSolve AI"
API_PREFIX = "/api"

# Refresh token cookie
REFRESH_COOKIE_NAME = "refreshToken"
REFRESH_COOKIE_PATH = "/"

# Pagination
DEFAULT_PAGE = 1
PROBLEM_DEFAULT_LIMIT = 20
PROBLEM_MAX_LIMIT = 50
RESOURCE_DEFAULT_LIMIT = 10
RESOURCE_MAX_LIMIT = 100
RESOURCE_SEARCH_MAX_LIMIT = 50
USER_DEFAULT_LIMIT = 20
USER_MAX_LIMIT = 100
SEARCH_MAX_LENGTH = 100

# Problem constraints
PROBLEM_TITLE_MAX = 200
PROBLEM_DESCRIPTION_MIN = 10
PROBLEM_DESCRIPTION_MAX = 5000
PROBLEM_CATEGORY_MAX = 50
PROBLEM_SOLUTION_MAX = 5000
PROBLEM_MAX_TAGS = 10
PROBLEM_TAG_MAX = 30
COMMENT_MAX = 2000

# Resource constraints
RESOURCE_TITLE_MAX = 200
RESOURCE_CONTENT_MIN = 50
RESOURCE_CONTENT_MAX = 50000
RESOURCE_CATEGORY_MAX = 50

# User constraints
USERNAME_MIN = 3
USERNAME_MAX = 30
BIO_MAX = 500
PASSWORD_MIN = 8
PASSWORD_MAX = 128

AVATAR_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}

# Gamification
RANK_THRESHOLDS = (
    (10000, "Diamond"),
    (5000, "Platinum"),
    (2500, "Gold"),
    (1000, "Silver"),
    (0, "Bronze"),
)
SOLVE_POINTS = {"LOW": 10, "MEDIUM": 25, "HIGH": 50}
HINT_PENALTY = 2

# Rate limits, expressed in the ``limits`` string notation
RATE_LIMITS = {
    "general": "100/15minutes",
    "auth": "5/15minutes",
    "problem_create": "10/hour",
    "rating": "50/hour",
    "search": "200/15minutes",
    "resource_create": "20/hour",
    "bookmark": "100/hour",
    "follow": "10/5minutes",
}
