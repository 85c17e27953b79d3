"""Point tags derived from the invoked function ARN and Lambda context.

Lambda ARN formats handled
(https://docs.aws.amazon.com/general/latest/gr/aws-arns-and-namespaces.html):

    arn:aws:lambda:us-west-2:123456789012:function:my-function
    arn:aws:lambda:us-west-2:123456789012:function:my-function:live
    arn:aws:lambda:us-west-2:123456789012:event-source-mappings:abc123
"""

import logging
from collections.abc import Mapping

from wavefront_lambda.constants import (
    TAG_ACCOUNT_ID,
    TAG_EVENT_SOURCE_MAPPINGS,
    TAG_EXECUTED_VERSION,
    TAG_FUNCTION_NAME,
    TAG_LAMBDA_ARN,
    TAG_REGION,
    TAG_RESOURCE,
    TAG_SOURCE,
)
from wavefront_lambda.exceptions.invocation_errors import InvalidResourceIdentifierError
from wavefront_lambda.types import LambdaContext

logger = logging.getLogger(__name__)

_REGION_SEGMENT = 3
_ACCOUNT_SEGMENT = 4
_TYPE_SEGMENT = 5
_NAME_SEGMENT = 6
_QUALIFIER_SEGMENT = 7
_QUALIFIED_SEGMENT_COUNT = 8

_FUNCTION_TYPE = "function"
_EVENT_SOURCE_MAPPING_TYPE = "event-source-mappings"


def derive_point_tags(resource_identifier: str) -> dict[str, str]:
    """Derive Region, accountId and resource tags from an ARN.

    Args:
        resource_identifier: Colon-delimited ARN.

    Returns:
        Tags keyed by point tag name. Unrecognized resource types yield only
        Region and accountId.

    Raises:
        InvalidResourceIdentifierError: If the ARN has too few segments for
            its resource type.
    """
    segments = resource_identifier.split(":")
    if len(segments) <= _TYPE_SEGMENT:
        raise InvalidResourceIdentifierError(
            f"Resource identifier has {len(segments)} segments, "
            f"expected at least {_TYPE_SEGMENT + 1}",
            resource_identifier=resource_identifier,
        )

    tags = {
        TAG_REGION: segments[_REGION_SEGMENT],
        TAG_ACCOUNT_ID: segments[_ACCOUNT_SEGMENT],
    }

    resource_type = segments[_TYPE_SEGMENT]
    if resource_type not in (_FUNCTION_TYPE, _EVENT_SOURCE_MAPPING_TYPE):
        return tags

    if len(segments) <= _NAME_SEGMENT:
        raise InvalidResourceIdentifierError(
            f"Resource identifier of type {resource_type!r} has no resource name",
            resource_identifier=resource_identifier,
        )

    if resource_type == _FUNCTION_TYPE:
        resource = segments[_NAME_SEGMENT]
        if len(segments) == _QUALIFIED_SEGMENT_COUNT:
            resource += ":" + segments[_QUALIFIER_SEGMENT]
        tags[TAG_RESOURCE] = resource
    else:
        tags[TAG_EVENT_SOURCE_MAPPINGS] = segments[_NAME_SEGMENT]

    return tags


def build_point_tags(
    context: LambdaContext,
    static_tags: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Assemble the full tag set for one invocation.

    An ARN that cannot be parsed is logged and the remaining tags are still
    returned.

    Args:
        context: Lambda context of the invocation.
        static_tags: Configured tags; invocation tags take precedence.

    Returns:
        A new tag dictionary owned by the caller.
    """
    function_arn = str(getattr(context, "invoked_function_arn", "") or "")
    function_name = str(getattr(context, "function_name", "") or "")

    tags = dict(static_tags or {})
    tags[TAG_LAMBDA_ARN] = function_arn
    tags[TAG_SOURCE] = function_name
    tags[TAG_FUNCTION_NAME] = function_name
    tags[TAG_EXECUTED_VERSION] = str(getattr(context, "function_version", "") or "")

    try:
        tags.update(derive_point_tags(function_arn))
    except InvalidResourceIdentifierError as error:
        logger.warning(
            "Skipping ARN-derived point tags: %s",
            error.message,
            extra=error.to_log_dict(),
        )

    return tags
