# admin/setup.py
from flask import flash, redirect, request, url_for
from flask_admin import Admin, AdminIndexView, expose
from flask_admin.contrib.sqla import ModelView
from flask_admin.menu import MenuLink
from flask_admin.theme import Bootstrap4Theme
from flask_login import current_user, login_user, logout_user
from wtforms.validators import ValidationError

from configs import db
from dao import item_category as category_dao, user as user_dao
from db.models.user import UserRole
from utils.errors import AuthenticationError, ConflictError, error_response

NO_ACCESS = "Anda tidak memiliki akses ke halaman admin"


def _is_admin():
    return current_user.is_authenticated and current_user.has_role(UserRole.ADMIN)


def _deny():
    # belum login -> halaman login panel, salah role -> 403
    if not current_user.is_authenticated:
        return redirect(url_for("admin.login_view", next=request.url))
    return error_response(NO_ACCESS, 403)


def _safe_next(target):
    # hanya path lokal, bukan //host atau URL absolut
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return url_for("admin.index")


class MyAdminIndex(AdminIndexView):
    @expose("/")
    def index(self):
        if not _is_admin():
            return _deny()
        return super().index()

    @expose("/login", methods=["GET", "POST"])
    def login_view(self):
        if _is_admin():
            return redirect(url_for("admin.index"))

        if request.method == "POST":
            username = request.form.get("username", "").strip()
            password = request.form.get("password", "")
            try:
                user = user_dao.authenticate(username, password)
            except AuthenticationError as e:
                flash(e.message, "danger")
                return self.render("admin/login.html", username=username)

            if not user.has_role(UserRole.ADMIN):
                flash(NO_ACCESS, "danger")
                return self.render("admin/login.html", username=username)

            login_user(user)
            return redirect(_safe_next(request.args.get("next")))

        return self.render("admin/login.html", username="")

    @expose("/logout")
    def logout_view(self):
        if current_user.is_authenticated:
            logout_user()
            flash("Berhasil keluar", "success")
        return redirect(url_for("admin.login_view"))


class SecureModelView(ModelView):
    can_view_details = True
    can_export = True
    form_excluded_columns = ["created_at", "updated_at"]

    def is_accessible(self):
        return _is_admin()

    def inaccessible_callback(self, name, **kwargs):
        return _deny()


class UserView(SecureModelView):
    can_create = False  # user baru lewat POST /users (hash password)
    can_delete = False  # soft delete lewat DELETE /users
    column_exclude_list = ["password_hash"]
    column_details_exclude_list = ["password_hash"]
    column_searchable_list = ["username", "name"]
    column_filters = ["role", "job_type", "is_active"]
    form_excluded_columns = ["password_hash", "created_at", "updated_at"]


class ItemCategoryView(SecureModelView):
    # hapus / nonaktifkan hanya lewat DELETE /item-categories (cek pemakaian)
    can_delete = False
    column_searchable_list = ["name"]
    form_excluded_columns = ["is_active", "items", "created_at", "updated_at"]

    def on_model_change(self, form, model, is_created):
        # model baru sudah di-add ke session; jangan ikut ter-flush saat cek nama
        with self.session.no_autoflush:
            try:
                category_dao.ensure_unique_name(model.name, exclude_id=model.id)
            except ConflictError as e:
                raise ValidationError(e.message)


class ItemView(SecureModelView):
    # barang dipakai di detail barang masuk/keluar; hapus lewat DELETE /items
    can_delete = False
    column_searchable_list = ["code", "name"]
    column_filters = ["category.name", "is_active"]
    column_list = [
        "id",
        "code",
        "name",
        "category",
        "unit",
        "stock",
        "min_stock",
        "location",
        "is_active",
    ]
    # stok hanya berubah lewat barang masuk / approval barang keluar
    form_excluded_columns = [
        "stock",
        "is_active",
        "created_by",
        "created_at",
        "updated_at",
    ]


class ReadOnlyModelView(SecureModelView):
    can_create = False
    can_edit = False
    can_delete = False


def init_admin(app):

    admin = Admin(
        app,
        name="Gudang Admin",
        theme=Bootstrap4Theme(),
        index_view=MyAdminIndex(url="/manage"),  # index di /manage/
        url="/manage",
    )
    # import model di sini untuk menghindari circular import
    from db.models.user import User
    from db.models.item import Item, ItemCategory
    from db.models.incoming import IncomingShipment
    from db.models.outgoing import OutgoingShipment

    admin.add_view(
        UserView(User, db.session, category="System", endpoint="admin_user", name="Users")
    )
    admin.add_view(
        ItemCategoryView(
            ItemCategory,
            db.session,
            category="Master Data",
            endpoint="admin_item_category",
            name="Jenis Barang",
        )
    )
    admin.add_view(
        ItemView(
            Item, db.session, category="Master Data", endpoint="admin_item", name="Barang"
        )
    )
    admin.add_view(
        ReadOnlyModelView(
            IncomingShipment,
            db.session,
            category="Transaksi",
            endpoint="admin_goods_in",
            name="Barang Masuk",
        )
    )
    admin.add_view(
        ReadOnlyModelView(
            OutgoingShipment,
            db.session,
            category="Transaksi",
            endpoint="admin_goods_out",
            name="Barang Keluar",
        )
    )
    admin.add_link(MenuLink(name="Logout", category="System", endpoint="admin.logout_view"))
    return admin
