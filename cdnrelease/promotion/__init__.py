from .policy import PromotionAction, PromotionDecision, decide

__all__ = ["PromotionAction", "PromotionDecision", "decide"]
