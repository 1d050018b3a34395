"""Export Service domain layer. CSV exports and the PDF statistics report."""

import csv
import io
from datetime import datetime
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy import func
from sqlalchemy.orm import Session
from ideaboard.models.comment import Comment
from ideaboard.models.idea import Idea, Like
from ideaboard.models.user import User
from ideaboard.services.idea_service import STATUSES

DATE_FORMAT = "%Y-%m-%d %H:%M"

IDEA_COLUMNS = ["ID", "Title", "Description", "Category", "Status", "Progress", "Author", "Likes", "Comments", "Created At"]
USER_COLUMNS = [
    "ID", "Username", "Email", "First Name", "Last Name", "Role",
    "XP Points", "Level", "Ideas Count", "Likes Given", "Comments", "Active", "Created At",
]


def _fmt_date(value: Optional[datetime]) -> str:
    return value.strftime(DATE_FORMAT) if value else ""


def _to_csv(header: List[str], rows: List[list]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(header)
    writer.writerows(rows)
    return output.getvalue()


def status_counts(db: Session) -> dict:
    rows = db.query(Idea.status, func.count(Idea.idea_id)).group_by(Idea.status).all()
    counts = {status: 0 for status in STATUSES}
    for status, count in rows:
        counts[status] = int(count)
    return counts


def category_counts(db: Session) -> List[tuple]:
    count = func.count(Idea.idea_id)
    rows = (
        db.query(Idea.category, count)
        .group_by(Idea.category)
        .order_by(count.desc(), Idea.category.asc())
        .all()
    )
    return [(row[0], int(row[1])) for row in rows]


def overview(db: Session) -> dict:
    return {
        "total_ideas": db.query(func.count(Idea.idea_id)).scalar() or 0,
        "total_users": db.query(func.count(User.user_id)).filter(User.is_active == True).scalar() or 0,  # noqa: E712
        "total_likes": db.query(func.count(Like.like_id)).scalar() or 0,
        "total_comments": db.query(func.count(Comment.comment_id)).scalar() or 0,
    }


def ideas_csv(db: Session) -> str:
    ideas = db.query(Idea).order_by(Idea.created_at.desc(), Idea.idea_id.desc()).all()
    rows = [
        [
            idea.idea_id,
            idea.title,
            idea.description,
            idea.category,
            idea.status,
            f"{idea.progress_percentage}%",
            idea.author.username if idea.author else "",
            idea.like_count,
            idea.comment_count,
            _fmt_date(idea.created_at),
        ]
        for idea in ideas
    ]
    return _to_csv(IDEA_COLUMNS, rows)


def users_csv(db: Session) -> str:
    idea_counts = dict(db.query(Idea.author_id, func.count(Idea.idea_id)).group_by(Idea.author_id).all())
    like_counts = dict(db.query(Like.user_id, func.count(Like.like_id)).group_by(Like.user_id).all())
    comment_counts = dict(db.query(Comment.author_id, func.count(Comment.comment_id)).group_by(Comment.author_id).all())

    users = db.query(User).order_by(User.user_id.asc()).all()
    rows = [
        [
            u.user_id,
            u.username,
            u.email,
            u.first_name or "",
            u.last_name or "",
            u.role,
            u.xp_points,
            u.level,
            idea_counts.get(u.user_id, 0),
            like_counts.get(u.user_id, 0),
            comment_counts.get(u.user_id, 0),
            "Yes" if u.is_active else "No",
            _fmt_date(u.created_at),
        ]
        for u in users
    ]
    return _to_csv(USER_COLUMNS, rows)


def statistics_csv(db: Session) -> str:
    stats = overview(db)
    rows = [["Total Ideas", stats["total_ideas"]]]
    for status, count in status_counts(db).items():
        rows.append([f"Ideas - {status}", count])
    rows.append(["Total Users", stats["total_users"]])
    rows.append(["Total Likes", stats["total_likes"]])
    rows.append(["Total Comments", stats["total_comments"]])
    for category, count in category_counts(db):
        rows.append([f"Category - {category}", count])
    return _to_csv(["Metric", "Value"], rows)


def _table(data: List[list], col_widths: List[float]) -> Table:
    table = Table(data, colWidths=col_widths)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2E4057")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#CCCCCC")),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F5F5")]),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    return table


def statistics_pdf(db: Session) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=2 * cm,
        leftMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
        title="IdeaBoard - Statistics Report",
    )
    page_width = A4[0] - 4 * cm

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle",
        parent=styles["Heading1"],
        fontSize=18,
        textColor=colors.HexColor("#2E4057"),
        spaceAfter=6,
    )
    section_style = ParagraphStyle(
        "Section",
        parent=styles["Heading2"],
        fontSize=13,
        textColor=colors.HexColor("#2E4057"),
        spaceBefore=12,
        spaceAfter=6,
    )

    stats = overview(db)
    story = [
        Paragraph("IdeaBoard - Statistics Report", title_style),
        Paragraph(f"Generated: {datetime.now().strftime(DATE_FORMAT)}", styles["Normal"]),
        Spacer(1, 0.5 * cm),
        Paragraph("Overview", section_style),
        _table(
            [
                ["Metric", "Value"],
                ["Total Ideas", stats["total_ideas"]],
                ["Total Users", stats["total_users"]],
                ["Total Likes", stats["total_likes"]],
                ["Total Comments", stats["total_comments"]],
            ],
            [page_width * 0.6, page_width * 0.4],
        ),
        Paragraph("Ideas by Status", section_style),
        _table(
            [["Status", "Count"]] + [[status, count] for status, count in status_counts(db).items()],
            [page_width * 0.6, page_width * 0.4],
        ),
        Paragraph("Ideas by Category", section_style),
        _table(
            [["Category", "Count"]] + [[c, n] for c, n in category_counts(db)],
            [page_width * 0.6, page_width * 0.4],
        ),
        Paragraph("Top 5 Ideas by Likes", section_style),
    ]

    top = (
        db.query(Idea)
        .order_by(Idea.like_count.desc(), Idea.created_at.desc(), Idea.idea_id.desc())
        .limit(5)
        .all()
    )
    if top:
        rows = [["#", "Title", "Author", "Likes"]]
        for rank, idea in enumerate(top, start=1):
            title = idea.title if len(idea.title) <= 40 else idea.title[:40] + "..."
            rows.append([rank, title, idea.author.username if idea.author else "", idea.like_count])
        story.append(_table(rows, [page_width * 0.08, page_width * 0.57, page_width * 0.2, page_width * 0.15]))
    else:
        story.append(Paragraph("No ideas yet.", styles["Italic"]))

    doc.build(story)
    return buffer.getvalue()
