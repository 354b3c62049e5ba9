from decimal import Decimal
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 下注 / 購買限制（單位：coins）
    min_bet: int = 50
    max_bet: int = 1_000_000
    max_purchase: int = 10_000_000
    initial_coins: int = 1000

    # 經濟參數
    house_fee_rate: Decimal = Decimal("0.02")
    coin_to_currency_rate: Decimal = Decimal("0.01")  # 1 coin = $0.01
    max_mistakes: int = 12
    perfect_multiplier: Decimal = Decimal("2")
    loss_mistake_threshold: int = 12

    # 節奏 / 紀錄
    resolution_delay_ms: int = 1000
    log_capacity: int = 50
    log_dedup_window_ms: int = 500

    pair_count: int = 6
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "HERO_MATCH_"

    @model_validator(mode="after")
    def check_limits(self):
        """
        拒絕互相矛盾的設定

        注意：
            - pair_count 上限由英雄清單決定，在這裡延遲 import 避免 circular import
        """
        from services.deck_service import HEROES

        if self.min_bet < 1:
            raise ValueError("min_bet must be >= 1")
        if self.min_bet > self.max_bet:
            raise ValueError(f"min_bet ({self.min_bet}) must not exceed max_bet ({self.max_bet})")
        if self.max_purchase < self.min_bet:
            raise ValueError("max_purchase must be >= min_bet")
        if not 1 <= self.pair_count <= len(HEROES):
            raise ValueError(f"pair_count must be between 1 and {len(HEROES)}")
        if self.max_mistakes < 1 or self.loss_mistake_threshold < 1:
            raise ValueError("max_mistakes and loss_mistake_threshold must be >= 1")
        if self.log_capacity < 1:
            raise ValueError("log_capacity must be >= 1")
        if not Decimal(0) <= self.house_fee_rate < Decimal(1):
            raise ValueError("house_fee_rate must be in [0, 1)")
        if self.resolution_delay_ms < 0 or self.log_dedup_window_ms < 0:
            raise ValueError("delays must be non-negative")
        return self


@lru_cache()
def get_settings():
    return Settings()
