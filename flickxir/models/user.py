"""
User account, session and profile models
"""
from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from flickxir.config import ADMIN_EMAILS
from flickxir.utils.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    full_name = Column(String(200), default="")
    phone = Column(String(20), default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    sessions = relationship("AuthSession", back_populates="user", cascade="all, delete-orphan")
    addresses = relationship("Address", back_populates="user", cascade="all, delete-orphan")
    cart = relationship("Cart", back_populates="user", uselist=False, cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="user")
    prescriptions = relationship("Prescription", back_populates="user")
    donations = relationship("Donation", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return (self.email or "").lower() in ADMIN_EMAILS

    def __repr__(self):
        return f"<User(id={self.user_id}, email={self.email})>"


class AuthSession(Base):
    __tablename__ = "auth_sessions"

    session_id = Column(Integer, primary_key=True, index=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)

    user = relationship("User", back_populates="sessions")

    def __repr__(self):
        return f"<AuthSession(id={self.session_id}, user_id={self.user_id})>"


class PasswordReset(Base):
    __tablename__ = "password_resets"

    reset_id = Column(Integer, primary_key=True, index=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)

    user = relationship("User")

    def __repr__(self):
        return f"<PasswordReset(id={self.reset_id}, user_id={self.user_id}, used={self.used})>"


class UserProfile(Base):
    __tablename__ = "user_profiles"

    profile_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), unique=True, nullable=False)
    first_name = Column(String(100), default="")
    last_name = Column(String(100), default="")
    email = Column(String(255))
    phone = Column(String(20), default="")
    address = Column(String(255), default="")
    city = Column(String(100), default="")
    state = Column(String(100), default="")
    pincode = Column(String(10), default="")
    gender = Column(String(20), default="")
    avatar_url = Column(String(500))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="profile")

    def __repr__(self):
        return f"<UserProfile(id={self.profile_id}, user_id={self.user_id})>"
