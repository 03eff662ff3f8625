import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from configs import db
from db.models.incoming import IncomingShipment, IncomingShipmentLine, SerializedUnit
from db.models.item import Item, ItemCategory
from db.models.user import JobType, User, UserRole
from utils.auth import create_access_token

PASSWORD = "Rahasia123"


@pytest.fixture
def app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "JWT_SECRET": "test-secret",
            "LOG_LEVEL": "WARNING",
        }
    )
    # context tidak dibiarkan terbuka: tiap request harus punya g sendiri
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(app, username, role, job_type=None, is_active=True):
    with app.app_context():
        u = User(
            username=username,
            password_hash=generate_password_hash(PASSWORD),
            name=username.title(),
            role=role,
            job_type=job_type,
            is_active=is_active,
        )
        db.session.add(u)
        db.session.commit()
        return u.id


def bearer(app, user_id):
    with app.app_context():
        token = create_access_token(db.session.get(User, user_id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(app):
    return make_user(app, "admin", UserRole.ADMIN, JobType.ADMIN)


@pytest.fixture
def supervisor(app):
    return make_user(app, "spv", UserRole.SUPERVISOR, JobType.SUPERVISOR)


@pytest.fixture
def staff(app):
    return make_user(app, "gudang", UserRole.PINDAH_LOKASI, JobType.STAFF)


@pytest.fixture
def admin_headers(app, admin):
    return bearer(app, admin)


@pytest.fixture
def supervisor_headers(app, supervisor):
    return bearer(app, supervisor)


@pytest.fixture
def staff_headers(app, staff):
    return bearer(app, staff)


def make_category(app, name="Sparepart"):
    with app.app_context():
        c = ItemCategory(name=name, description="Suku cadang")
        db.session.add(c)
        db.session.commit()
        return c.id


def make_item(app, code, name, stock=0, category_id=None):
    with app.app_context():
        it = Item(code=code, name=name, unit="pcs", stock=stock, category_id=category_id)
        db.session.add(it)
        db.session.commit()
        return it.id


def receive(app, item_id, serials, arrival_code="KD-001", form_no="F-001"):
    """Barang masuk langsung lewat model (stok ikut ditambah). Return id unit."""
    with app.app_context():
        item = db.session.get(Item, item_id)
        shipment = IncomingShipment(
            arrival_code=arrival_code,
            supplier_name="PT Sumber",
            form_no=form_no,
            status="received",
        )
        line = IncomingShipmentLine(item=item, quantity=len(serials))
        for s in serials:
            line.units.append(SerializedUnit(serial_no=s))
        shipment.lines.append(line)
        item.stock += len(serials)
        db.session.add(shipment)
        db.session.commit()
        return [u.id for u in line.units]


def stock_of(app, item_id):
    with app.app_context():
        return db.session.get(Item, item_id).stock


@pytest.fixture
def category(app):
    return make_category(app)


@pytest.fixture
def item(app, category):
    return make_item(app, "BRG-001", "Mesin A", category_id=category)
