"""CloudScope constants and layout values.

This module centralizes magic numbers shared by the enumeration
orchestrator and the graph synthesizers.
"""

# Synthetic progress entry tracking the backend call
API_PROGRESS_CODE = "api"

# Progress
PROGRESS_COMPLETE = 100
DEFAULT_API_PROGRESS_CAP = 90
DEFAULT_PROGRESS_TICK_STEP = 5
DEFAULT_PROGRESS_TICK_INTERVAL = 0.2  # seconds

# Progress status texts
STATUS_PENDING = "pending"
STATUS_WAITING = "waiting for backend"
STATUS_API_DONE = "backend responded"
STATUS_NO_RESOURCES = "no resources found"
STATUS_CANCELLED = "cancelled"

# Region used when neither the item nor the credential names one
DEFAULT_REGION = "global"

# Selection keyword meaning every type of the provider
ALL_TYPES = "all"

# Resource group persistence key
GROUPS_STORE_KEY = "resourceGroups"

# Topology layout
TOPOLOGY_ROOT_ID = "account"
TOPOLOGY_ROOT_X = 400
TOPOLOGY_ROOT_Y = 0
TOPOLOGY_BASE_X = 0
TOPOLOGY_COLUMN_WIDTH = 300
TOPOLOGY_VPC_ROW = 150
TOPOLOGY_ROW_OFFSET = 150
TOPOLOGY_CHILD_SPACING = 120

# Escalation layout
ESCALATION_ROOT_ID = "root"
ESCALATION_COLUMNS = 3
ESCALATION_COLUMN_WIDTH = 250
ESCALATION_ROW_HEIGHT = 120
SUGGESTED_PATH_HINT = "suggested-path"

# Attack path layout
ATTACK_PATH_CENTER_X = 250
ATTACK_PATH_ROW_HEIGHT = 100
ATTACK_PATH_RESOURCE_X = 100
ATTACK_PATH_RESOURCE_SPACING = 200

# Backend
DEFAULT_BACKEND_URL = "http://localhost:8080/api"
DEFAULT_REQUEST_TIMEOUT = 60  # seconds
GENERIC_BACKEND_ERROR = "Unknown backend error"
