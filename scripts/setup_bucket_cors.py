# scripts/setup_bucket_cors.py
"""Apply the browser upload/playback CORS rules to the video bucket."""

from saivd.core.config import PUBLIC_APP_URL, WASABI_BUCKET_NAME
from saivd.infra.s3 import storage
from saivd.utils.logger import setup_logger

DEV_ORIGINS = ["http://localhost:3000", "http://localhost:3001"]


def build_cors_rules(app_url: str = PUBLIC_APP_URL) -> list[dict]:
    origins = [o for o in dict.fromkeys([app_url, *DEV_ORIGINS]) if o]
    return [
        {
            "AllowedHeaders": ["*"],
            "AllowedMethods": ["GET", "HEAD"],
            "AllowedOrigins": origins,
            "ExposeHeaders": ["ETag", "Content-Length", "Content-Type"],
            "MaxAgeSeconds": 3600,
        },
        {
            "AllowedHeaders": ["*"],
            "AllowedMethods": ["PUT", "POST"],
            "AllowedOrigins": origins,
            "ExposeHeaders": ["ETag"],
            "MaxAgeSeconds": 3600,
        },
    ]


def main():
    setup_logger()
    print(f"Configuring CORS for bucket: {WASABI_BUCKET_NAME}")
    storage.put_cors(build_cors_rules())
    print("✅ CORS configuration applied")

    for i, rule in enumerate(storage.get_cors(), start=1):
        print(f"\nRule {i}:")
        print(f"  Methods: {', '.join(rule.get('AllowedMethods', []))}")
        print(f"  Origins: {', '.join(rule.get('AllowedOrigins', []))}")
        print(f"  MaxAge: {rule.get('MaxAgeSeconds')}")


if __name__ == "__main__":
    main()
