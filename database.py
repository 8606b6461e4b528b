# database.py
import logging
import re
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import (create_engine, Column, Integer, String, Float,
                        ForeignKey, Date, JSON, UniqueConstraint)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker, relationship
from werkzeug.security import generate_password_hash, check_password_hash

from calculator import EmissionsResult, InvalidInputError, LifestyleInputs, parse_inputs
from config import settings
from progress import (HistoryEntry, LeaderboardRow, SubmissionStatus, UserProgress,
                      LEADERBOARD_SIZE, empty_badges, newly_unlocked, rank_users,
                      submission_status, submit)

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(url):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


engine = make_engine(settings.database_url)
Session = sessionmaker(bind=engine)


class User(Base):
    __tablename__ = "users"
    id              = Column(Integer, primary_key=True)
    name            = Column(String, unique=True, nullable=False)
    email           = Column(String, unique=True, nullable=False)
    password        = Column(String, nullable=False)  # werkzeug password hash
    group_id        = Column(String, index=True)
    group_name      = Column(String)
    points          = Column(Integer, nullable=False, default=0)
    streak          = Column(Integer, nullable=False, default=0)
    last_submission = Column(Date)
    last_form       = Column(JSON)

    history = relationship("HistoryRecord", back_populates="user",
                           order_by="HistoryRecord.date")
    badges = relationship("UserBadge", back_populates="user")


class HistoryRecord(Base):
    __tablename__ = "history_entries"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_history_user_day"),)
    id       = Column(Integer, primary_key=True)
    user_id  = Column(Integer, ForeignKey("users.id"), nullable=False)
    date     = Column(Date, nullable=False)
    form     = Column(JSON, nullable=False)
    total    = Column(Float, nullable=False)
    travel   = Column(Float, nullable=False)
    diet     = Column(Float, nullable=False)
    shopping = Column(Float, nullable=False)

    user = relationship("User", back_populates="history")

    def to_entry(self) -> HistoryEntry:
        return HistoryEntry(
            date=self.date,
            form=dict(self.form or {}),
            total=self.total,
            breakdown={"travel": self.travel, "diet": self.diet, "shopping": self.shopping},
        )


class UserBadge(Base):
    __tablename__ = "user_badges"
    __table_args__ = (UniqueConstraint("user_id", "badge_id", name="uq_badge_user"),)
    id        = Column(Integer, primary_key=True)
    user_id   = Column(Integer, ForeignKey("users.id"), nullable=False)
    badge_id  = Column(String, nullable=False)
    earned_on = Column(Date, nullable=False)

    user = relationship("User", back_populates="badges")


@dataclass
class SubmissionOutcome:
    progress: UserProgress
    status: SubmissionStatus
    unlocked: List[str]


def init_db(bind=None):
    Base.metadata.create_all(bind or engine)


@contextmanager
def session_scope():
    db = Session()
    try:
        yield db
    finally:
        db.close()


# ---- accounts ----

def create_user(db, name, email, password) -> Optional[User]:
    user = User(name=name.strip(), email=email.strip().lower(),
                password=generate_password_hash(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Sign-up rejected, name or email already taken: %s", email)
        return None
    logger.info("Created user %s (id=%s)", user.name, user.id)
    return user


def authenticate(db, email, password) -> Optional[User]:
    user = db.query(User).filter_by(email=email.strip().lower()).first()
    if user and check_password_hash(user.password, password):
        return user
    return None


# ---- progress ----

_locks_guard = threading.Lock()
_user_locks = {}


@contextmanager
def _user_lock(user_id):
    with _locks_guard:
        lock = _user_locks.setdefault(user_id, threading.Lock())
    with lock:
        yield


def load_progress(db, user: User) -> UserProgress:
    badges = empty_badges()
    for badge in user.badges:
        badges[badge.badge_id] = True
    return UserProgress(
        points=user.points or 0,
        streak=user.streak or 0,
        last_submission_date=user.last_submission,
        history=[record.to_entry() for record in user.history],
        badges=badges,
    )


def save_submission(db, user_id, result: EmissionsResult, inputs: LifestyleInputs,
                    today: Optional[date] = None) -> SubmissionOutcome:
    """Load the user's progress, apply ``submit`` and store it in one transaction.

    Saves for the same user are serialised so a same-day resubmission cannot
    append twice or count the streak twice.
    """
    today = today or date.today()
    form = inputs.to_form()
    with _user_lock(user_id):
        try:
            user = db.query(User).filter_by(id=user_id).with_for_update().one()
            before = load_progress(db, user)
            status = submission_status(before, today)
            after = submit(today, result, form, before)

            if status is SubmissionStatus.RECORDED:
                entry = after.history[-1]
                db.add(HistoryRecord(
                    user_id=user.id, date=entry.date, form=entry.form, total=entry.total,
                    travel=result.travel, diet=result.diet, shopping=result.shopping,
                ))
                user.points = after.points
                user.streak = after.streak
                user.last_submission = after.last_submission_date
            user.last_form = form

            unlocked = newly_unlocked(before.badges, after.badges)
            for badge_id in unlocked:
                db.add(UserBadge(user_id=user.id, badge_id=badge_id, earned_on=today))
            db.commit()
        except Exception:
            db.rollback()
            raise

    if status is SubmissionStatus.RECORDED:
        logger.info("User %s saved %s: total=%.1f points=%s streak=%s",
                    user_id, today, result.total, after.points, after.streak)
    else:
        logger.info("User %s already submitted on %s, history unchanged", user_id, today)
    if unlocked:
        logger.info("User %s unlocked badges: %s", user_id, ", ".join(unlocked))
    return SubmissionOutcome(progress=after, status=status, unlocked=unlocked)


def last_form(db, user_id) -> Optional[LifestyleInputs]:
    user = db.get(User, user_id)
    if user is None or not user.last_form:
        return None
    try:
        return parse_inputs(user.last_form)
    except InvalidInputError:
        logger.warning("Stored form for user %s is invalid, ignoring it", user_id)
        return None


# ---- leaderboards & groups ----

def leaderboard(db, limit=LEADERBOARD_SIZE) -> List[LeaderboardRow]:
    users = db.query(User).order_by(User.points.desc(), User.id).limit(limit).all()
    return rank_users(users, limit)


def group_slug(group_name: str) -> str:
    return re.sub(r"\s+", "-", group_name.strip().lower())


def join_group(db, user_id, group_name) -> str:
    group_name = (group_name or "").strip()
    if not group_name:
        raise InvalidInputError("group_name", "enter a group/family name")
    user = db.query(User).filter_by(id=user_id).one()
    user.group_id = group_slug(group_name)
    user.group_name = group_name
    db.commit()
    logger.info("User %s joined group %s", user_id, user.group_id)
    return user.group_id


def group_leaderboard(db, user_id) -> Optional[Tuple[str, List[LeaderboardRow]]]:
    user = db.get(User, user_id)
    if user is None or not user.group_id:
        return None
    members = db.query(User).filter_by(group_id=user.group_id).all()
    return user.group_name, rank_users(members, limit=None)
