"""AWS messaging normalizers: SNS topics and SQS queues."""

from __future__ import annotations

from typing import Any, Dict

from ...core.models import Resource
from ...core.registry import normalizers
from ..base import NormalizerDefaults, arn_tail, build_resource, ensure_mapping, require


@normalizers.normalizer(name="sns", provider="aws")
def normalize_sns_topic(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an SNS topic."""
    raw = ensure_mapping(raw, "sns")
    topic_arn = require(raw, "topicArn", "sns")
    return build_resource(
        "sns",
        raw,
        defaults,
        id=topic_arn,
        name=raw.get("name") or arn_tail(topic_arn),
        subscriptionsConfirmed=raw.get("subscriptionsConfirmed"),
    )


@normalizers.normalizer(name="sqs", provider="aws")
def normalize_sqs_queue(raw: Dict[str, Any], defaults: NormalizerDefaults) -> Resource:
    """Normalize an SQS queue."""
    raw = ensure_mapping(raw, "sqs")
    queue_url = require(raw, "queueUrl", "sqs")
    return build_resource(
        "sqs",
        raw,
        defaults,
        id=queue_url,
        name=raw.get("queueName") or arn_tail(queue_url),
        arn=raw.get("queueArn"),
        approximateNumberOfMessages=raw.get("approximateNumberOfMessages"),
    )
