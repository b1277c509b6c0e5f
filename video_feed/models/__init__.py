"""Record model and upstream payload mapping."""

from video_feed.models.mapping import child_to_record, children_to_records
from video_feed.models.video import VideoRecord

__all__ = ["VideoRecord", "child_to_record", "children_to_records"]
