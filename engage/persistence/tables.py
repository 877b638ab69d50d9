"""SQLAlchemy table definitions for Engage.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

metadata = MetaData()

# ============================================================================
# USERS TABLE (accounts are provisioned by the authentication service)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("handle", String(255), nullable=False, unique=True),
    Column(
        "role",
        Enum("user", "admin", name="user_role"),
        nullable=False,
        server_default="user",
    ),
    Column("verified", Boolean, nullable=False, server_default=text("false")),
    Column("blocked", Boolean, nullable=False, server_default=text("false")),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
)

# ============================================================================
# POSTS TABLE
# ============================================================================
posts_table = Table(
    "posts",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("slug", String(100), nullable=False, unique=True),
    Column("title", String(300), nullable=False),
    Column("content", Text, nullable=False),
    Column(
        "author_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("author_handle", String(255), nullable=False),  # Denormalized from users
    # Aggregate counters, written only together with the votes ledger
    Column("upvotes", Integer, nullable=False, server_default="0"),
    Column("downvotes", Integer, nullable=False, server_default="0"),
    Column("blocked", Boolean, nullable=False, server_default=text("false")),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    CheckConstraint("upvotes >= 0", name="posts_upvotes_non_negative"),
    CheckConstraint("downvotes >= 0", name="posts_downvotes_non_negative"),
)

Index("idx_posts_created_at", posts_table.c.created_at.desc())
Index("idx_posts_author_id", posts_table.c.author_id)

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("post_id", UUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    Column(
        "author_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("author_handle", String(255), nullable=False),  # Denormalized from users
    Column("text", Text, nullable=False),
    Column("upvotes", Integer, nullable=False, server_default="0"),
    Column("downvotes", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    CheckConstraint("upvotes >= 0", name="comments_upvotes_non_negative"),
    CheckConstraint("downvotes >= 0", name="comments_downvotes_non_negative"),
)

Index("idx_comments_post_id", comments_table.c.post_id)

# ============================================================================
# VOTES TABLE (ledger for posts and comments)
# ============================================================================
votes_table = Table(
    "votes",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "votable_type",
        Enum("post", "comment", name="votable_type"),
        nullable=False,
    ),
    Column("votable_id", UUID, nullable=False),
    Column(
        "vote_type",
        Enum("upvote", "downvote", name="vote_type"),
        nullable=False,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    UniqueConstraint("user_id", "votable_type", "votable_id", name="unique_vote"),
)

Index("idx_votes_user_id", votes_table.c.user_id)
Index("idx_votes_votable", votes_table.c.votable_type, votes_table.c.votable_id)

# ============================================================================
# POLLS TABLES
# ============================================================================
polls_table = Table(
    "polls",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("post_id", UUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    Column(
        "author_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("question", String(500), nullable=False),
    Column("description", Text, nullable=True),
    Column("allow_multiple_votes", Boolean, nullable=False, server_default=text("false")),
    Column("is_active", Boolean, nullable=False, server_default=text("true")),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
)

Index("idx_polls_post_id", polls_table.c.post_id)

poll_options_table = Table(
    "poll_options",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("poll_id", UUID, ForeignKey("polls.id", ondelete="CASCADE"), nullable=False),
    Column("option_text", String(500), nullable=False),
    Column("position", Integer, nullable=False, server_default="0"),
    UniqueConstraint("poll_id", "position", name="uq_poll_option_position"),
)

poll_votes_table = Table(
    "poll_votes",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("poll_id", UUID, ForeignKey("polls.id", ondelete="CASCADE"), nullable=False),
    Column(
        "poll_option_id",
        UUID,
        ForeignKey("poll_options.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    # True for votes cast on a single-choice poll
    Column("exclusive", Boolean, nullable=False, server_default=text("false")),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()")
    ),
    UniqueConstraint("poll_option_id", "user_id", name="uq_poll_vote_option_user"),
)

Index("idx_poll_votes_poll_id", poll_votes_table.c.poll_id)

# One vote per user on a single-choice poll
Index(
    "uq_poll_votes_exclusive_voter",
    poll_votes_table.c.poll_id,
    poll_votes_table.c.user_id,
    unique=True,
    postgresql_where=poll_votes_table.c.exclusive,
)
