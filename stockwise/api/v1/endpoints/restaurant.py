from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from stockwise.core.db import get_db
from stockwise.models.models import Restaurant
from stockwise.schemas.inventory import RestaurantCreate, RestaurantRead


router = APIRouter()


def get_restaurant_or_404(db: Session, restaurant_id: int) -> Restaurant:
    restaurant = db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    return restaurant


@router.get("/", response_model=list[RestaurantRead])
def list_restaurants(db: Session = Depends(get_db)):
    return db.query(Restaurant).order_by(Restaurant.id).all()


@router.get("/{id}", response_model=RestaurantRead)
def get_restaurant(id: int, db: Session = Depends(get_db)):
    return get_restaurant_or_404(db, id)


@router.post("/", response_model=RestaurantRead, status_code=status.HTTP_201_CREATED)
def create_restaurant(data: RestaurantCreate, db: Session = Depends(get_db)):
    existing = db.query(Restaurant).filter(Restaurant.name == data.name).first()
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Restaurant name already exists")

    restaurant = Restaurant(name=data.name)
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant
