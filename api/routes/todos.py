from typing import Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app import todo_service
from app.db import get_db
from schemas.todos import TaskCreate, TaskResponse, TaskUpdate

router = APIRouter(prefix="/api/todos", tags=["To-do Tasks"])


@router.get("/user/{user_id}/daily", response_model=List[TaskResponse])
def daily_tasks(user_id: int, db: Session = Depends(get_db)):
    """Today's tasks. Listing also creates any due recurring instances."""
    return [t.to_dict() for t in todo_service.get_daily_tasks(db, user_id)]


@router.get("/user/{user_id}", response_model=List[TaskResponse])
def all_tasks(user_id: int, db: Session = Depends(get_db)):
    return [t.to_dict() for t in todo_service.get_tasks_for_user(db, user_id)]


@router.get("/user/{user_id}/category/{category}", response_model=List[TaskResponse])
def tasks_by_category(user_id: int, category: str, db: Session = Depends(get_db)):
    return [t.to_dict() for t in todo_service.get_tasks_by_category(db, user_id, category)]


@router.post("/user/{user_id}/assessment/{assessment_id}", response_model=List[TaskResponse])
def create_from_assessment(
    user_id: int,
    assessment_id: int,
    category_tasks: Dict[str, List[str]],
    db: Session = Depends(get_db),
):
    tasks = todo_service.create_tasks_from_assessment(db, user_id, assessment_id, category_tasks)
    return [t.to_dict() for t in tasks]


@router.post("/user/{user_id}/assessment/{assessment_id}/suggestions", response_model=List[TaskResponse])
def create_from_suggestions(user_id: int, assessment_id: int, db: Session = Depends(get_db)):
    tasks = todo_service.create_tasks_from_suggestions(db, user_id, assessment_id)
    return [t.to_dict() for t in tasks]


@router.post("/user/{user_id}/recommendations", response_model=List[TaskResponse])
def create_from_recommendations(user_id: int, db: Session = Depends(get_db)):
    tasks = todo_service.create_tasks_from_recommendations(db, user_id)
    return [t.to_dict() for t in tasks]


@router.post("", response_model=TaskResponse)
def create_task(payload: TaskCreate, db: Session = Depends(get_db)):
    task = todo_service.create_task(
        db,
        user_id=payload.user_id,
        task=payload.task,
        category=payload.category,
        scheduled_date=payload.scheduled_date,
        source_assessment_id=payload.source_assessment_id,
    )
    return task.to_dict()


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(task_id: int, payload: TaskUpdate, db: Session = Depends(get_db)):
    return todo_service.update_task(db, task_id, payload.completed).to_dict()


@router.delete("/{task_id}")
def delete_task(task_id: int, db: Session = Depends(get_db)):
    todo_service.delete_task(db, task_id)
    return {"message": f"Task {task_id} deleted"}
