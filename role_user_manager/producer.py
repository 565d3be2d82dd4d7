import json
import logging
import ssl

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from kafka import KafkaProducer

from role_user_manager.settings import USER_EVENTS_TOPIC
from role_user_manager.typing import UserEventDict
from role_user_manager.utils.classes import Singleton
from role_user_manager.utils.functions import get_kafka_bootstrap_servers

logger = logging.getLogger(__name__)


class Producer(metaclass=Singleton):
    __connection = None

    def __init__(self):
        connection_kwargs = {}
        # MSK brokers resolved from an ARN only accept TLS, a plain KAFKA_BROKER is used as is.
        if getattr(settings, "KAFKA_ARN", None):
            connection_kwargs = {
                "ssl_context": ssl.create_default_context(purpose=ssl.Purpose.SERVER_AUTH),
                "security_protocol": "SSL",
            }

        self.__connection = KafkaProducer(
            bootstrap_servers=get_kafka_bootstrap_servers(include_uri_scheme=False),
            value_serializer=lambda v: json.dumps(v, cls=DjangoJSONEncoder).encode("utf-8"),
            **connection_kwargs,
        )

    def send_message(self, topic: str, key: str, data: dict):
        self.__connection.send(topic=topic, key=key.encode("utf-8"), value=data)
        # Sometimes messages do not get sent.
        # Flushing after each message seems to solve the issue
        self.__connection.flush()

    def send_user_event(self, event: UserEventDict):
        """
        Events of the same user share a key, so they land on the same partition in order.
        """
        logger.info(f"Sending {event['event_type']} event for user {event['user_id']}")
        self.send_message(topic=USER_EVENTS_TOPIC, key=str(event["user_id"]), data=event)
