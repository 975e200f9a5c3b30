"""Initialize the database with the super admin, a reward catalog and starter content."""

from sqlalchemy.orm import Session

from authentication.auth import get_password_hash
from models.config import settings
from repositories.database import Base, SessionLocal, engine
from repositories.db_models import (
    ContentCategory,
    EducationalContent,
    Profile,
    ProfileRole,
    Reward,
    RewardCategory,
)


def get_default_rewards() -> list[dict]:
    """Starter reward catalog, cheapest first.

    `available_quantity` of None means unlimited stock.
    """
    return [
        {
            "title": "Reconocimiento Ciudadano Verde",
            "description": "Insignia digital visible en tu perfil por cuidar la ciudad",
            "points_required": 50,
            "category": RewardCategory.RECONOCIMIENTO,
            "available_quantity": None,
        },
        {
            "title": "10% de descuento en vivero municipal",
            "description": "Cupón válido en plantas y semillas del vivero municipal",
            "points_required": 100,
            "category": RewardCategory.DESCUENTO,
            "available_quantity": 200,
        },
        {
            "title": "Pase gratuito al transporte público",
            "description": "Un día de viajes ilimitados en la red de transporte urbano",
            "points_required": 150,
            "category": RewardCategory.BENEFICIO,
            "available_quantity": 100,
        },
        {
            "title": "Kit de compostaje doméstico",
            "description": "Compostera y guía para reciclar residuos orgánicos en casa",
            "points_required": 300,
            "category": RewardCategory.BENEFICIO,
            "available_quantity": 25,
        },
    ]


def get_default_content() -> list[dict]:
    """Published starter campaigns, tips and activities."""
    return [
        {
            "title": "Separa tus residuos",
            "content": (
                "Usa un contenedor para orgánicos, otro para reciclables y otro "
                "para residuos no aprovechables. Enjuaga envases antes de reciclarlos."
            ),
            "category": ContentCategory.CONSEJO,
        },
        {
            "title": "Campaña: Parques sin plástico",
            "content": (
                "Durante este mes retiramos plásticos de un solo uso de los parques. "
                "Reporta zonas con acumulación de basura desde la app."
            ),
            "category": ContentCategory.CAMPANA,
        },
        {
            "title": "Jornada de siembra comunitaria",
            "content": (
                "Únete a la siembra de árboles nativos en tu barrio. "
                "Trae guantes y agua; las herramientas las pone el municipio."
            ),
            "category": ContentCategory.ACTIVIDAD,
        },
    ]


def seed_database(db: Session) -> dict[str, int]:
    """Insert default data that is not there yet.

    Safe to run repeatedly: the admin is matched by email, rewards and
    content are only seeded into empty tables.

    Returns:
        Number of rows created per kind.
    """
    created = {"admin": 0, "rewards": 0, "content": 0}

    admin_email = settings.ADMIN_EMAIL.strip().lower()
    admin = db.query(Profile).filter(Profile.email == admin_email).first()
    if admin is None:
        admin = Profile(
            email=admin_email,
            full_name="Administrador",
            hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
            role=ProfileRole.SUPER_ADMIN,
            points=0,
        )
        db.add(admin)
        db.flush()
        created["admin"] = 1

    if db.query(Reward).first() is None:
        rewards = [Reward(**reward) for reward in get_default_rewards()]
        db.add_all(rewards)
        created["rewards"] = len(rewards)

    if db.query(EducationalContent).first() is None:
        items = [
            EducationalContent(**item, author_id=admin.id, is_published=True)
            for item in get_default_content()
        ]
        db.add_all(items)
        created["content"] = len(items)

    db.commit()
    return created


def init_db() -> None:
    """Create tables and seed default data."""
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created = seed_database(db)
        if created["admin"]:
            print("[OK] Super admin created")
            print(f"  Email: {settings.ADMIN_EMAIL}")
            print("  Password: (from ADMIN_PASSWORD in .env)")
            print("  IMPORTANT: Change this password in production!")
        if created["rewards"]:
            print(f"[OK] {created['rewards']} default rewards created")
        if created["content"]:
            print(f"[OK] {created['content']} educational items created")

        print("\n[OK] Database initialization complete!")
    except Exception as e:
        print(f"Error initializing database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
