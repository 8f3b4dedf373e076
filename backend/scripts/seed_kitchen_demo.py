#!/usr/bin/env python3
"""
Seed roles and demo staff for manual testing of the floor and kitchen.

Safe to run more than once: existing roles and accounts are updated in place.
"""

import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

os.environ.setdefault('ENVIRONMENT', 'development')

from sqlalchemy.orm import Session
from core.database import SessionLocal
from modules.staff.enums.staff_enums import StaffRole
from modules.staff.models.staff_models import StaffMember, Role

ROLE_DESCRIPTIONS = {
    StaffRole.ADMIN: "Full system access",
    StaffRole.WAITER: "Takes and edits table orders",
    StaffRole.COOK: "Prepares dishes on the kitchen line",
    StaffRole.BARTENDER: "Prepares drinks at the bar",
}

DEMO_STAFF = [
    ("Admin", "admin", "admin@demo.com", StaffRole.ADMIN),
    ("Waiter Demo", "waiter1", "waiter1@demo.com", StaffRole.WAITER),
    ("Cook Demo", "cook1", "cook1@demo.com", StaffRole.COOK),
    ("Second Cook", "cook2", "cook2@demo.com", StaffRole.COOK),
    ("Bartender Demo", "bart1", "bart1@demo.com", StaffRole.BARTENDER),
]


def seed_roles(db: Session):
    """Create or refresh the four floor and kitchen roles."""
    print("Creating roles...")
    roles = {}
    for role_name, description in ROLE_DESCRIPTIONS.items():
        role = db.query(Role).filter(Role.name == role_name.value).first()
        if role is None:
            role = Role(name=role_name.value)
            db.add(role)
        role.description = description
        roles[role_name] = role
    db.commit()
    print(f"Roles ready: {', '.join(r.value for r in roles)}")
    return roles


def seed_staff(db: Session, roles):
    """Create the demo accounts, re-enabling any that were switched off."""
    print("Creating demo staff...")
    for name, username, email, role_name in DEMO_STAFF:
        member = db.query(StaffMember).filter(StaffMember.username == username).first()
        if member is None:
            member = StaffMember(name=name, username=username, email=email)
            db.add(member)
        member.role = roles[role_name]
        member.is_active = True
    db.commit()
    print(f"Created or updated {len(DEMO_STAFF)} staff accounts")


def main():
    """Run all seeding functions."""
    print("Starting kitchen demo seeding...")
    print("=" * 50)

    db = SessionLocal()

    try:
        roles = seed_roles(db)
        seed_staff(db, roles)

        print("\n" + "=" * 50)
        print("Kitchen demo seeding completed successfully!")
        print("\nDemo accounts:")
        for name, username, _, role_name in DEMO_STAFF:
            print(f"- {role_name.value}: {username} ({name})")

    except Exception as e:
        print(f"\nError seeding data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
