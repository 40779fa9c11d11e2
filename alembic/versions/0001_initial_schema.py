"""Initial questions, answers and tags

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""
import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

Id = sa.BigInteger().with_variant(sa.Integer, "sqlite")


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", Id, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
    )
    op.create_table(
        "tag",
        sa.Column("id", Id, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
    )
    op.create_index("ix_tag_name", "tag", ["name"])

    op.create_table(
        "question",
        sa.Column("id", Id, primary_key=True, autoincrement=True),
        sa.Column("user_id", Id, sa.ForeignKey("user.id"), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("question", sa.Text, nullable=False),
        sa.Column("votes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("answered", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("slack_thread_id", sa.String(64), nullable=True, unique=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_question_user_id", "question", ["user_id"])
    op.create_index("ix_question_created_at", "question", ["created_at"])

    op.create_table(
        "answer",
        sa.Column("id", Id, primary_key=True, autoincrement=True),
        sa.Column("user_id", Id, sa.ForeignKey("user.id"), nullable=False),
        sa.Column("question_id", Id, sa.ForeignKey("question.id"), nullable=False),
        sa.Column("title", sa.String(300), nullable=True),
        sa.Column("answer", sa.Text, nullable=False),
        sa.Column("votes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("accepted", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("slack_thread_id", sa.String(64), nullable=True, unique=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_answer_question_id_created_at", "answer", ["question_id", "created_at"])

    op.create_table(
        "question_tag",
        sa.Column(
            "question_id", Id, sa.ForeignKey("question.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column("tag_id", Id, sa.ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True),
    )


def downgrade():
    op.drop_table("question_tag")
    op.drop_index("ix_answer_question_id_created_at", table_name="answer")
    op.drop_table("answer")
    op.drop_index("ix_question_created_at", table_name="question")
    op.drop_index("ix_question_user_id", table_name="question")
    op.drop_table("question")
    op.drop_index("ix_tag_name", table_name="tag")
    op.drop_table("tag")
    op.drop_table("user")
