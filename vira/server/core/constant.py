"""Constants shared by the API layer."""

PROJECT_NAME = "ViRA"
PROJECT_DESCRIPTION = "Vendor Relationship Management API"
API_V1_STR = "/api/v1"

# CSV import limits
CSV_MAX_FILE_SIZE = 10 * 1024 * 1024
CSV_DEFAULT_BATCH_SIZE = 50

# Review assignments
DEFAULT_REVIEW_DUE_DAYS = 7

# Vendor invites
INVITE_EXPIRY_DAYS = 7
