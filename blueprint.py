from index import main_bp
from routes.auth import auth_bp
from routes.item_category import category_bp
from routes.item import item_bp
from routes.goods_in import goods_in_bp
from routes.goods_out import goods_out_bp
from routes.user import user_bp
from routes.serial_unit import serial_unit_bp


def blue_print(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(category_bp)
    app.register_blueprint(item_bp)
    app.register_blueprint(goods_in_bp)
    app.register_blueprint(serial_unit_bp)
    app.register_blueprint(goods_out_bp)
    app.register_blueprint(user_bp)
