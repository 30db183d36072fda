import json, uuid, logging
from typing import List
from pydantic import BaseModel, ValidationError

from ad_variations import config
from ad_variations.models import Ad, VariationRequest
from ad_variations.aggregate import process_variations
from ad_variations.storage import hash_missing_creatives

logging.basicConfig(level=config.LOG_LEVEL)

log = logging.getLogger()
log.setLevel(config.LOG_LEVEL)


class BackfillRequest(BaseModel):
    ads: List[Ad]


def _error(status: int, detail: str, corr_id: str) -> dict:
    return {"statusCode": status,
            "headers": {"Content-Type": "application/json",
                        "X-Correlation-Id": corr_id},
            "body": json.dumps({"detail": detail,
                                "correlation_id": corr_id})}


def lambda_handler(event, context):
    corr_id = str(uuid.uuid4())
    try:
        body = json.loads(event.get("body") or "{}")
        req  = VariationRequest.model_validate(body)
        result = process_variations(req, corr_id)
        return {
            "statusCode": 200,
            "headers": {"Content-Type": "application/json",
                        "X-Correlation-Id": corr_id},
            "body": result.model_dump_json()
        }
    except (ValidationError, ValueError) as ve:
        log.warning("%s input error: %s", corr_id, ve)
        return _error(422, str(ve), corr_id)
    except Exception:
        log.exception("%s unhandled", corr_id)
        return _error(500, "internal error", corr_id)


def backfill_handler(event, context):
    corr_id = str(uuid.uuid4())
    try:
        body = json.loads(event.get("body") or "{}")
        req  = BackfillRequest.model_validate(body)
        hashes = hash_missing_creatives(req.ads)
        log.info("%s hashed %d creatives", corr_id, len(hashes))
        return {
            "statusCode": 200,
            "headers": {"Content-Type": "application/json",
                        "X-Correlation-Id": corr_id},
            "body": json.dumps({"processed": len(hashes),
                                "hashes": {str(k): v for k, v in hashes.items()}})
        }
    except (ValidationError, ValueError) as ve:
        log.warning("%s input error: %s", corr_id, ve)
        return _error(422, str(ve), corr_id)
    except Exception:
        log.exception("%s unhandled", corr_id)
        return _error(500, "internal error", corr_id)
