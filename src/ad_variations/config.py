import os
from dotenv import load_dotenv

load_dotenv()

# clustering
PHASH_THRESHOLD   = int(os.getenv("PHASH_THRESHOLD", "4"))
HAMMING_SYMMETRIC = os.getenv("HAMMING_SYMMETRIC", "false").lower() in ("1", "true", "yes")

# hash backfill
HASH_BATCH_SIZE = int(os.getenv("HASH_BATCH_SIZE", "5"))
CREATIVE_EXTENSIONS = ("jpeg", "jpg", "png", "webp")

SUPABASE_URL = os.getenv("SUPABASE_URL")
AD_BUCKET_PHOTO = os.getenv("AD_BUCKET_PHOTO")
AD_BUCKET_VIDEO_PREVIEW = os.getenv("AD_BUCKET_VIDEO_PREVIEW")

# Supabase storage exposes an S3-compatible endpoint
STORAGE_S3_ENDPOINT = os.getenv("STORAGE_S3_ENDPOINT")
STORAGE_ACCESS_KEY_ID = os.getenv("STORAGE_ACCESS_KEY_ID")
STORAGE_SECRET_ACCESS_KEY = os.getenv("STORAGE_SECRET_ACCESS_KEY")
STORAGE_REGION = os.getenv("STORAGE_REGION", "us-east-1")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
