# conexao/__init__.py
import logging
import os

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()

def create_app(config_object='config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Logs
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=app.config.get('LOG_LEVEL', 'INFO'),
    )

    # Inicializar extensões
    db.init_app(app)
    migrate.init_app(app, db)

    # Importar modelos para registrar as tabelas no metadata
    from conexao import models  # noqa: F401

    # Criar diretórios necessários
    os.makedirs(app.instance_path, exist_ok=True)

    return app
