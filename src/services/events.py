"""Event publishing service for moderation and payout changes."""

import json
import logging
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.core.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class EventType(Enum):
    """Marketplace event types."""
    SONG_STATUS_CHANGED = "marketplace.song.status_changed"
    ALBUM_STATUS_CHANGED = "marketplace.album.status_changed"
    ALBUM_SUBMITTED = "marketplace.album.submitted"
    COMPLAINT_FILED = "marketplace.complaint.filed"
    COMPLAINT_RESOLVED = "marketplace.complaint.resolved"
    DISPUTE_RESOLVED = "marketplace.dispute.resolved"
    PAYOUT_RUN_COMPLETED = "marketplace.payout.run_completed"
    PAYOUT_PAID = "marketplace.payout.paid"


@dataclass
class MarketplaceEvent:
    """Base marketplace event structure."""
    event_type: EventType
    resource_id: str
    resource_type: str
    data: Dict[str, Any]
    actor_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    # Auto-generated fields
    event_id: str = None
    timestamp: str = None
    version: str = "1.0"

    def __post_init__(self):
        if self.event_id is None:
            self.event_id = str(uuid.uuid4())
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["event_type"] = self.event_type.value
        return payload


class EventPublisher:
    """
    Service for publishing marketplace events.

    Events are notifications emitted after a change has been committed.
    Publishing failures are logged and reported through the return value;
    they never undo or fail the committed change.
    """

    def __init__(self):
        self.event_bus_type = settings.event_bus_type
        self.sqs_client = None
        self.queue_url = settings.sqs_event_queue_url

        if self.event_bus_type == "sqs":
            self._initialize_sqs()

    def _initialize_sqs(self):
        """Initialize SQS client."""
        try:
            self.sqs_client = boto3.client(
                "sqs",
                region_name=settings.aws_region,
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key,
            )
            logger.info("SQS client initialized for event publishing")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to initialize SQS client: {e}")
            self.sqs_client = None

    async def publish_event(self, event: MarketplaceEvent) -> bool:
        """Publish a marketplace event."""
        if self.event_bus_type == "sqs":
            return await self._publish_to_sqs(event)
        return await self._publish_mock(event)

    async def _publish_to_sqs(self, event: MarketplaceEvent) -> bool:
        """Publish event to SQS queue."""
        if not self.sqs_client or not self.queue_url:
            logger.warning("SQS not properly configured, skipping event publish")
            return False

        try:
            message_body = json.dumps(event.to_dict(), default=str)
            message_attributes = {
                "event_type": {
                    "StringValue": event.event_type.value,
                    "DataType": "String"
                },
                "resource_type": {
                    "StringValue": event.resource_type,
                    "DataType": "String"
                }
            }

            response = self.sqs_client.send_message(
                QueueUrl=self.queue_url,
                MessageBody=message_body,
                MessageAttributes=message_attributes,
                MessageGroupId=event.resource_id,  # For FIFO queues
                MessageDeduplicationId=event.event_id
            )

            logger.info(f"Published event {event.event_id} to SQS: {response['MessageId']}")
            return True

        except (BotoCoreError, ClientError) as e:
            logger.error(f"SQS error publishing event {event.event_id}: {e}")
            return False

    async def _publish_mock(self, event: MarketplaceEvent) -> bool:
        """Mock event publishing for development."""
        logger.info(f"MOCK EVENT: {event.event_type.value} - {event.event_id}")
        logger.debug(f"Event data: {json.dumps(event.to_dict(), indent=2, default=str)}")
        return True

    async def publish(
        self,
        event_type: EventType,
        resource_type: str,
        resource_id: Any,
        data: Dict[str, Any],
        actor_id: Any = None,
    ) -> bool:
        """Build and publish an event for a single resource."""
        event = MarketplaceEvent(
            event_type=event_type,
            resource_id=str(resource_id),
            resource_type=resource_type,
            data=data,
            actor_id=str(actor_id) if actor_id else None,
            metadata={
                "source": "music_marketplace_service",
                "api_version": "v1"
            }
        )
        return await self.publish_event(event)

    async def publish_song_status_changed(
        self,
        song_id: Any,
        status: str,
        actor_id: Any = None,
        reason: Optional[str] = None,
    ) -> bool:
        """Publish song status changed event."""
        data = {"status": status}
        if reason:
            data["reason"] = reason
        return await self.publish(
            EventType.SONG_STATUS_CHANGED, "song", song_id, data, actor_id
        )

    async def publish_album_status_changed(
        self,
        album_id: Any,
        status: str,
        actor_id: Any = None,
        reason: Optional[str] = None,
    ) -> bool:
        """Publish album status changed event."""
        data = {"status": status}
        if reason:
            data["reason"] = reason
        return await self.publish(
            EventType.ALBUM_STATUS_CHANGED, "album", album_id, data, actor_id
        )


# Global event publisher instance
_event_publisher = None


def get_event_publisher() -> EventPublisher:
    """Get the global event publisher instance."""
    global _event_publisher
    if _event_publisher is None:
        _event_publisher = EventPublisher()
    return _event_publisher
