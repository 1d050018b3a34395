"""Groups API router. Idea discussion groups and group chat."""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from ideaboard.database import get_db
from ideaboard.schemas.group import GroupMessageCreate, GroupMessageOut, GroupOut, MembershipOut, UnreadCountOut
from ideaboard.services import group_service
from ideaboard.middleware.auth_middleware import get_current_user
from ideaboard.models.user import User

router = APIRouter(prefix="/api/groups", tags=["groups"])


@router.get("", response_model=List[GroupOut])
def list_my_groups(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return group_service.list_user_groups(db, current_user)


@router.get("/unread-count", response_model=UnreadCountOut)
def unread_count(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"unread_count": group_service.total_unread(db, current_user)}


@router.get("/idea/{idea_id}", response_model=GroupOut)
def get_group_by_idea(idea_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return group_service.get_group_by_idea(db, idea_id, current_user)


@router.post("/idea/{idea_id}/join", response_model=GroupOut)
def join_group_by_idea(idea_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return group_service.join_group_by_idea(db, idea_id, current_user)


@router.get("/idea/{idea_id}/membership", response_model=MembershipOut)
def membership_by_idea(idea_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return group_service.membership_by_idea(db, idea_id, current_user)


@router.get("/{group_id}", response_model=GroupOut)
def get_group(group_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return group_service.get_group(db, group_id, current_user)


@router.post("/{group_id}/join", response_model=GroupOut)
def join_group(group_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return group_service.join_group(db, group_id, current_user)


@router.delete("/{group_id}/leave", status_code=status.HTTP_204_NO_CONTENT)
def leave_group(group_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    group_service.leave_group(db, group_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{group_id}/membership", response_model=MembershipOut)
def membership(group_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return group_service.membership(db, group_id, current_user)


@router.get("/{group_id}/messages", response_model=List[GroupMessageOut])
def list_messages(group_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return group_service.list_messages(db, group_id, current_user)


@router.post("/{group_id}/messages", response_model=GroupMessageOut, status_code=status.HTTP_201_CREATED)
def send_message(
    group_id: int,
    data: GroupMessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return group_service.send_message(db, group_id, data.content, current_user)


@router.put("/{group_id}/messages/read", response_model=UnreadCountOut)
def mark_all_read(group_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    result = group_service.mark_all_read(db, group_id, current_user)
    return {"unread_count": result["unread_count"]}
