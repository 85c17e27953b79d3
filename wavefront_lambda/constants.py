"""Metric names, point tag keys and configuration defaults."""

SERVICE_NAME = "wavefront-lambda"

# Standard metrics
METRIC_PREFIX = "aws.lambda.wf."
COLD_STARTS_METRIC = f"{METRIC_PREFIX}coldstarts"
INVOCATIONS_METRIC = f"{METRIC_PREFIX}invocations"
ERRORS_METRIC = f"{METRIC_PREFIX}errors"
DURATION_METRIC = f"{METRIC_PREFIX}duration"

# Memory metrics
MEMORY_TOTAL_METRIC = f"{METRIC_PREFIX}mem.total"
MEMORY_USED_METRIC = f"{METRIC_PREFIX}mem.used"
MEMORY_PERCENTAGE_METRIC = f"{METRIC_PREFIX}mem.percentage"

# Point tag keys
TAG_LAMBDA_ARN = "LambdaArn"
TAG_SOURCE = "source"
TAG_FUNCTION_NAME = "FunctionName"
TAG_EXECUTED_VERSION = "ExecutedVersion"
TAG_REGION = "Region"
TAG_ACCOUNT_ID = "accountId"
TAG_RESOURCE = "Resource"
TAG_EVENT_SOURCE_MAPPINGS = "EventSourceMappings"

# Configuration defaults
DEFAULT_ENABLED = True
DEFAULT_BATCH_SIZE = 10_000
DEFAULT_MAX_BUFFER_SIZE = 50_000
DEFAULT_FLUSH_INTERVAL_SECONDS = 1

BYTES_PER_MEGABYTE = 1 << 20
