"""
Request orchestration for POST /api/audit-dish.

1. Vision: is it food, what is it, packaged or prepared?
2. RecipeDB / FlavorDB: ingredients and nutrition for prepared dishes.
3. Merge by priority and return one normalized summary.
"""

import logging
import time
from typing import Any, Dict, Optional, Tuple

from dish_audit.config import AuditSettings
from dish_audit.image_preprocess import prepare_photo
from dish_audit.merger import merge_results
from dish_audit.models import AuditRequest, ClassificationResult
from dish_audit.nutrition_db import NutritionDbClient
from dish_audit.vision import VisionClassifier

logger = logging.getLogger(__name__)

DEFAULT_DISH_NAME = "Detected Dish"
NOT_FOOD_REASON = "Image does not appear to be food."


class DishAuditHandler:
    def __init__(
        self,
        settings: AuditSettings,
        classifier: Optional[VisionClassifier] = None,
        db_client: Optional[NutritionDbClient] = None,
    ):
        self.settings = settings
        self.classifier = classifier or VisionClassifier.from_settings(settings)
        self.db_client = db_client or NutritionDbClient.from_settings(settings)

    def handle(self, body: Any) -> Tuple[int, Dict[str, Any]]:
        """Return (http_status, json_body). Unexpected errors become HTTP 500."""
        try:
            if body is None:
                raise ValueError("Request body is null")
            # Non-object bodies carry no orderId / photoUrls
            request = AuditRequest.model_validate(body if isinstance(body, dict) else {})
            return 200, self.audit(request)
        except Exception as e:
            logger.exception("[AUDIT] Unhandled error")
            return 500, {
                "status": "error",
                "message": "Internal Server Error",
                "debug": str(e),
            }

    def audit(self, request: AuditRequest) -> Dict[str, Any]:
        total_start = time.time()
        logger.info("[AUDIT] Audit received for order: %s", request.order_id)

        dish_name = DEFAULT_DISH_NAME
        classification: Optional[ClassificationResult] = None

        photo = request.first_photo
        if photo:
            vision_start = time.time()
            logger.info("[AUDIT] Step 1: Running vision analysis")
            classification = self.classifier.classify(prepare_photo(photo, self.settings))
            logger.info(
                "[AUDIT] Step 1: Vision completed in %sms: %s",
                round((time.time() - vision_start) * 1000, 2),
                classification.model_dump(by_alias=True, exclude_none=True),
            )

            if classification.is_food is False:
                return {
                    "status": "error",
                    "reason": classification.reason or classification.error or NOT_FOOD_REASON,
                    "refundAmount": 0,
                }
            dish_name = classification.dish_name or dish_name
        else:
            logger.warning("[AUDIT] Skipping vision analysis: no photo")

        recipe = None
        flavor = None
        if classification is not None and classification.is_packaged:
            logger.info("[AUDIT] Step 2: Packaged food, trusting classifier ingredients")
        else:
            logger.info("[AUDIT] Step 2: Prepared food, querying databases for %r", dish_name)
            recipe, flavor = self.db_client.lookup(dish_name)

        data = merge_results(dish_name, classification, recipe, flavor)
        logger.info(
            "[AUDIT] Completed in %sms, score=%s",
            round((time.time() - total_start) * 1000, 2),
            data.score,
        )

        return {
            "status": "success",
            "message": f"Dish verified: {dish_name}",
            "data": data.model_dump(by_alias=True),
        }
