import base64
import os
import re
from datetime import datetime
from typing import Any, Optional, Union

import boto3
from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.utils.html import strip_tags

ROLE_NAME_PATTERN = re.compile(r"^[a-z0-9_-]{1,140}$")


def keep_keys(dictionary, keys):
    return {k: v for k, v in dictionary.items() if k in keys}


def get_or_none(records, *args, **kwargs):
    try:
        return records.get(*args, **kwargs)
    except ObjectDoesNotExist:
        return None


def update_record(record, save=True, **data):
    if data:
        for key, value in data.items():
            setattr(record, key, value)
        if save:
            record.save()
    return record


def to_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def sanitize_text(value: Any) -> str:
    """
    Strip tags, collapse whitespace and trim, the way a single-line text input is cleaned.
    """
    if value is None:
        return ""
    return " ".join(strip_tags(str(value)).split())


def sanitize_role(value: Any) -> str:
    return re.sub(r"[^a-z0-9_-]", "", sanitize_text(value).lower())


def is_valid_role_name(role: str) -> bool:
    return bool(ROLE_NAME_PATTERN.match(role or ""))


def split_sites(value: Any) -> list[str]:
    """
    Accept either a comma separated string or a list of site names.
    Entries are trimmed and empty entries dropped.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    return [site.strip() for entry in value for site in str(entry).split(",") if site.strip()]


def get_list_param(data, key: str) -> list:
    """
    Read a list parameter from form encoded (`key` or `key[]`) or JSON request data.
    """
    if hasattr(data, "getlist"):
        values = data.getlist(key) or data.getlist(f"{key}[]")
    else:
        values = data.get(key) or []
    return values if isinstance(values, list) else [values]


def get_kafka_bootstrap_servers(include_uri_scheme=True):
    """
    If ARN is available, it means we can connect to the production servers.
    We have to find the bootstrap servers and create the connection using them.
    """
    if kafka_arn := getattr(settings, "KAFKA_ARN", None):
        resource = boto3.client("kafka", region_name=os.getenv("AWS_REGION", "eu-central-1"))
        response = resource.get_bootstrap_brokers(
            ClusterArn=base64.b64decode(kafka_arn).decode("utf-8")
        )
        assert (
                "BootstrapBrokerStringTls" in response.keys()
        ), "Something went wrong while receiving kafka servers!"

        bootstrap_servers = response.get("BootstrapBrokerStringTls").split(",")
        if not include_uri_scheme:
            return bootstrap_servers
        return [f"kafka://{host}" for host in bootstrap_servers]
    else:
        kafka_url = settings.KAFKA_BROKER
        return f"kafka://{kafka_url}" if include_uri_scheme else kafka_url


def is_kafka_configured() -> bool:
    return bool(getattr(settings, "KAFKA_ARN", None) or getattr(settings, "KAFKA_BROKER", None))


def optional_str(value: Optional[Any]) -> str:
    return "" if value is None else str(value)


def format_short_date(value: Union[str, datetime, None]) -> str:
    """
    Format a date like "Mar 1, 2024". ISO formatted strings are accepted.
    """
    if not value:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return f"{value:%b} {value.day}, {value.year}"
