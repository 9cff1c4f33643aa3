from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .models import HabitGoal, Plan, PrimaryGoal, Profile, Routine, SecondaryGoal, Session

logger = logging.getLogger(__name__)


class FitnessState(BaseModel):
    """Everything one user's planner works on, mutated only through its methods."""

    profile: Profile = Field(default_factory=Profile)
    primary_goal: Optional[PrimaryGoal] = None
    secondary_goal: Optional[SecondaryGoal] = None
    habits: List[HabitGoal] = Field(default_factory=list)
    plan: Optional[Plan] = None
    routines: Dict[str, Routine] = Field(default_factory=dict)
    sessions: List[Session] = Field(default_factory=list)
    active_session_id: Optional[str] = None

    def upsert_routine(self, routine: Routine) -> Routine:
        self.routines[routine.id] = routine
        return routine

    def active_session(self) -> Optional[Session]:
        if self.active_session_id is None:
            return None
        return next((s for s in self.sessions if s.id == self.active_session_id), None)

    def start_session(self, routine_id: str, now: datetime) -> Optional[Session]:
        if routine_id not in self.routines:
            logger.info("Cannot start session: unknown routine %s", routine_id)
            return None
        session = Session(id=uuid.uuid4().hex, routine_id=routine_id, started_at=now)
        # newest first
        self.sessions.insert(0, session)
        self.active_session_id = session.id
        logger.info("Started session %s for routine %s", session.id, routine_id)
        return session

    def end_session(self, now: datetime) -> Optional[Session]:
        session = self.active_session()
        self.active_session_id = None
        if session is None:
            return None
        session.ended_at = now
        logger.info("Ended session %s", session.id)
        return session
