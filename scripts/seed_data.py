from medibook import create_app
from medibook.config import Config
from medibook.stores.seed import seed_sample_data


class SeedConfig(Config):
    DATA_BACKEND = "sql"
    SEED_SAMPLE_DATA = False

app = create_app(SeedConfig)

with app.app_context():
    seeded = seed_sample_data()

if seeded:
    print("Sample data loaded into", app.config["SQLALCHEMY_DATABASE_URI"])
else:
    print("Database already contains the sample data, nothing to do.")
