# seed_gallery.py
from gallery_app import create_app, store
from gallery_app.services.seeder import seed_catalog

app = create_app()

with app.app_context():
    print(f"Scanning {store('blobs').root} ...")

    result = seed_catalog(store('catalog'), store('blobs'))

    for category, paths in result.items():
        print(f"   - {category}: {len(paths)} image(s)")

    print(f"{app.config['GALLERY_JSON_PATH']} generated")
