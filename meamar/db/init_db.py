import argparse
import logging
from typing import Optional
from sqlalchemy.orm import Session
from meamar.db.base import Base, Category, User
from meamar.db.session import SessionLocal
from meamar.models.user import UserRole

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {
        "name": "Decoration & Design",
        "name_ar": "الديكور والتصميم",
        "description": "Paint, wallpaper, lighting & decorative items",
        "description_ar": "الطلاء والخلفيات والإضاءة والعناصر الزخرفية",
    },
    {
        "name": "Furniture & Fixtures",
        "name_ar": "الأثاث والتجهيزات",
        "description": "Office, home & commercial furniture solutions",
        "description_ar": "حلول الأثاث المكتبي والمنزلي والتجاري",
    },
    {
        "name": "Contracting Services",
        "name_ar": "خدمات المقاولات",
        "description": "General contracting & specialized construction",
        "description_ar": "المقاولات العامة والبناء المتخصص",
    },
    {
        "name": "Electrical Supplies",
        "name_ar": "اللوازم الكهربائية",
        "description": "Wiring, fixtures, panels & electrical components",
        "description_ar": "الأسلاك والتجهيزات واللوحات والمكونات الكهربائية",
    },
    {
        "name": "Sanitary & Plumbing",
        "name_ar": "الصحي والسباكة",
        "description": "Fixtures, pipes, fittings & bathroom accessories",
        "description_ar": "التجهيزات والأنابيب والوصلات وإكسسوارات الحمام",
    },
    {
        "name": "Tools & Equipment",
        "name_ar": "الأدوات والمعدات",
        "description": "Power tools, hand tools & construction equipment",
        "description_ar": "الأدوات الكهربائية واليدوية ومعدات البناء",
    },
]

def init_db(db: Session, admin_email: Optional[str] = None) -> None:
    Base.metadata.create_all(bind=db.get_bind())

    # Seed top-level categories on an empty catalog
    if db.query(Category).count() == 0:
        for sort_order, data in enumerate(DEFAULT_CATEGORIES):
            db.add(Category(sort_order=sort_order, **data))
        db.commit()
        logger.info("Seeded default categories", extra={"count": len(DEFAULT_CATEGORIES)})

    # Users only exist after their first login, so admins are promoted, not created
    if admin_email:
        user = db.query(User).filter(User.email == admin_email).first()
        if not user:
            logger.warning("No user with email %s has logged in yet", admin_email)
            return
        user.role = UserRole.ADMIN
        db.commit()
        logger.info("Promoted user to admin", extra={"user_id": user.id})

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create tables and seed reference data")
    parser.add_argument("--admin-email", help="promote this existing user to admin")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    db = SessionLocal()
    try:
        init_db(db, admin_email=args.admin_email)
    finally:
        db.close()
