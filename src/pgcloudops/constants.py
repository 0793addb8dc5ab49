"""Baked-in defaults for the schema sync and Cloud Run deployment."""

DEFAULT_POSTGRES_PORT = "5432"
DEFAULT_LOCAL_HOST = "localhost"
DEFAULT_LOCAL_DB = "ugs"
DEFAULT_LOCAL_USER = "postgres"

ENV_FILE_NAME = ".env"
DUMP_DIR_NAME = "dumps"
DUMP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
DEPLOY_CONFIG_FILE_NAME = ".pgcloudops.yml"

PROJECT_ID = "ut-dnr-ugs-mappingdb-prod"
REGION = "us-central1"
SERVICE_NAME = "pgadmin"
IMAGE = "dpage/pgadmin4:latest"

VPC_NETWORK = "projects/ut-dnr-shared-vpc-prod/global/networks/ut-dnr-shared-vpc-prod-vpc"
VPC_SUBNET = (
    "projects/ut-dnr-shared-vpc-prod/regions/us-central1/subnetworks/"
    "ut-dnr-shared-vpc-prod-subnet-uscent1"
)

EMAIL_SECRET = "pgadmin-email"
PASSWORD_SECRET = "pgadmin-password"
BUCKET_PREFIX = "pgadmin-data"
VOLUME_NAME = "pgadmin-data"
VOLUME_MOUNT_PATH = "/var/lib/pgadmin"

CONTAINER_PORT = 8080
MEMORY = "512Mi"
CPU = "1"
MIN_INSTANCES = 0
MAX_INSTANCES = 2
REQUEST_TIMEOUT = 300
EXECUTION_ENVIRONMENT = "gen2"

SECRET_ACCESSOR_ROLE = "roles/secretmanager.secretAccessor"
STORAGE_OBJECT_ADMIN_ROLE = "roles/storage.objectAdmin"
RUN_INVOKER_ROLE = "roles/run.invoker"
IAP_ACCESSOR_ROLE = "roles/iap.httpsResourceAccessor"

EXAMPLE_USER_EMAIL = "user@utah.gov"
