import logging
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import AppConfig
from .errors import FitnessError
from .models import (
    HabitCreate,
    HabitGoal,
    Plan,
    PrimaryGoalUpdate,
    Profile,
    ProgressDelta,
    ProgressSummary,
    ProgressValue,
    Routine,
    SecondaryGoalUpdate,
    Session,
)
from .service import FitnessService
from .store import JsonStore

config = AppConfig()
logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(title="Basement Fitness Planner API", version="0.1.0")

# CORS (allow the static front end on localhost)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

service = FitnessService(JsonStore(config.store_path), history_limit=config.habit_history_limit)


def get_service() -> FitnessService:
    return service


@app.get("/health")
def health():
    return {"status": "ok"}


# --- profile & goals ---
@app.get("/profile", response_model=Profile)
def read_profile(svc: FitnessService = Depends(get_service)):
    return svc.load_state().profile


@app.put("/profile", response_model=Profile)
def update_profile(profile: Profile, svc: FitnessService = Depends(get_service)):
    return svc.update_profile(profile)


@app.put("/goals/primary")
def set_primary_goal(body: PrimaryGoalUpdate, svc: FitnessService = Depends(get_service)):
    svc.set_primary_goal(body.goal)
    return {"status": "ok", "plan_cleared": True}


@app.delete("/goals/primary")
def clear_primary_goal(svc: FitnessService = Depends(get_service)):
    svc.clear_primary_goal()
    return {"status": "ok"}


@app.put("/goals/secondary")
def set_secondary_goal(body: SecondaryGoalUpdate, svc: FitnessService = Depends(get_service)):
    svc.set_secondary_goal(body.goal)
    return {"status": "ok"}


# --- plan & workouts ---
@app.get("/plan", response_model=Optional[Plan])
def read_plan(svc: FitnessService = Depends(get_service)):
    return svc.current_plan()


@app.post("/plan/regenerate", response_model=Plan)
def regenerate_plan(svc: FitnessService = Depends(get_service)):
    try:
        return svc.regenerate_plan(datetime.now())
    except FitnessError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/plan/{date}/start", response_model=Optional[Session])
def start_planned_workout(date: str, svc: FitnessService = Depends(get_service)):
    try:
        return svc.start_planned_workout(date, datetime.now())
    except FitnessError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/workouts/today", response_model=Session)
def generate_today(svc: FitnessService = Depends(get_service)):
    return svc.generate_today(datetime.now())


@app.post("/workouts/end", response_model=Optional[Session])
def end_workout(svc: FitnessService = Depends(get_service)):
    return svc.end_workout(datetime.now())


@app.get("/routines", response_model=List[Routine])
def list_routines(svc: FitnessService = Depends(get_service)):
    return svc.routines()


@app.get("/sessions", response_model=List[Session])
def list_sessions(svc: FitnessService = Depends(get_service)):
    return svc.sessions()


# --- habits & progress ---
@app.get("/habits", response_model=List[HabitGoal])
def list_habits(svc: FitnessService = Depends(get_service)):
    return svc.habits()


@app.post("/habits", response_model=HabitGoal)
def add_habit(body: HabitCreate, svc: FitnessService = Depends(get_service)):
    return svc.add_habit(body)


@app.delete("/habits/{goal_id}")
def delete_habit(goal_id: str, svc: FitnessService = Depends(get_service)):
    return {"deleted": svc.delete_habit(goal_id)}


@app.post("/habits/{goal_id}/increment", response_model=List[HabitGoal])
def increment_habit(goal_id: str, body: ProgressDelta, svc: FitnessService = Depends(get_service)):
    svc.increment_habit(goal_id, body.delta, datetime.now())
    return svc.habits()


@app.put("/habits/{goal_id}/progress", response_model=List[HabitGoal])
def set_habit_progress(goal_id: str, body: ProgressValue, svc: FitnessService = Depends(get_service)):
    svc.set_habit_progress(goal_id, body.value, datetime.now())
    return svc.habits()


@app.get("/progress", response_model=ProgressSummary)
def read_progress(svc: FitnessService = Depends(get_service)):
    return svc.progress_summary(datetime.now())
