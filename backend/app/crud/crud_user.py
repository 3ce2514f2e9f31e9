from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Optional

from .. import models, schemas
from ..models.booking_status import BookingStatus
from ..utils.auth import get_password_hash, normalize_email


class CRUDUser:
    def get_user(self, db: Session, user_id: int) -> Optional[models.User]:
        return db.query(models.User).filter(models.User.id == user_id).first()

    def get_user_by_email(self, db: Session, email: str) -> Optional[models.User]:
        return db.query(models.User).filter(models.User.email == normalize_email(email)).first()

    def create_user(self, db: Session, user: schemas.UserCreate) -> models.User:
        db_user = models.User(
            email=normalize_email(user.email),
            password=get_password_hash(user.password),
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            role=user.role,
            language=user.language,
        )
        if user.role == models.UserRole.PROVIDER:
            # Providers always carry a profile, even an empty one
            db_user.provider_profile = models.ProviderProfile(
                business_name=user.business_name,
            )
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        return db_user

    def update_user(
        self, db: Session, db_user: models.User, user_in: schemas.UserUpdate
    ) -> models.User:
        for field, value in user_in.model_dump(exclude_unset=True).items():
            setattr(db_user, field, value)
        db.commit()
        db.refresh(db_user)
        return db_user

    def update_provider_profile(
        self, db: Session, db_user: models.User, profile_in: schemas.ProviderProfileUpdate
    ) -> models.ProviderProfile:
        profile = db_user.provider_profile
        if profile is None:
            profile = models.ProviderProfile(user_id=db_user.id)
            db.add(profile)
        for field, value in profile_in.model_dump(exclude_unset=True).items():
            setattr(profile, field, value)
        db.commit()
        db.refresh(profile)
        return profile

    def deactivate(self, db: Session, db_user: models.User) -> models.User:
        db_user.is_active = False
        db.commit()
        db.refresh(db_user)
        return db_user

    def mark_email_verified(self, db: Session, db_user: models.User) -> models.User:
        db_user.is_verified = True
        db.commit()
        db.refresh(db_user)
        return db_user

    def verify_provider(self, db: Session, db_user: models.User) -> models.ProviderProfile:
        profile = db_user.provider_profile
        if profile is None:
            profile = models.ProviderProfile(user_id=db_user.id)
            db.add(profile)
        profile.is_verified = True
        db.commit()
        db.refresh(profile)
        return profile

    def get_stats(self, db: Session, db_user: models.User) -> dict:
        """Booking, review and listing counters for a dashboard."""
        is_provider = db_user.role == models.UserRole.PROVIDER
        owner_col = models.Booking.provider_id if is_provider else models.Booking.customer_id
        bookings = db.query(models.Booking).filter(owner_col == db_user.id)
        stats = {
            "total_bookings": bookings.count(),
            "completed_bookings": bookings.filter(
                models.Booking.status == BookingStatus.COMPLETED
            ).count(),
        }
        if is_provider:
            reviews = db.query(models.Review).filter(models.Review.provider_id == db_user.id)
            avg = (
                db.query(func.avg(models.Review.rating))
                .filter(models.Review.provider_id == db_user.id)
                .scalar()
            )
            stats["total_reviews"] = reviews.count()
            stats["average_rating"] = round(float(avg), 2) if avg is not None else 0.0
            stats["total_services"] = (
                db.query(models.Service).filter(models.Service.provider_id == db_user.id).count()
            )
        else:
            stats["total_reviews"] = (
                db.query(models.Review).filter(models.Review.customer_id == db_user.id).count()
            )
        return stats


user = CRUDUser()  # Create an instance for easy import
