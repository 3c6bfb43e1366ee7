# blog/models/follow.py
import uuid
from tortoise import fields, models

class Follow(models.Model):
    """
    Directed follow edge: ``follower`` follows ``following``.
    - (follower, following) is unique, so an edge exists at most once
    - Edges are deleted together with either endpoint
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    follower = fields.ForeignKeyField(
        "models.User", related_name="following_edges", on_delete=fields.CASCADE
    )
    following = fields.ForeignKeyField(
        "models.User", related_name="follower_edges", on_delete=fields.CASCADE
    )
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "follows"
        unique_together = (("follower", "following"),)
