"""
牌組服務：產生並洗牌每一回合的牌面

純計算邏輯，不涉及狀態轉換
"""
import random
from typing import List, Optional, Sequence

from models import Hero, Tile


HEROES = (
    Hero(name="Lucky Lynx", symbol="🃏", color="#ffc966"),
    Hero(name="Fortune Fox", symbol="🦊", color="#ff5b7c"),
    Hero(name="Roulette Raven", symbol="🦅", color="#44e28f"),
    Hero(name="Spin Shark", symbol="🦈", color="#7694ff"),
    Hero(name="Dice Dragon", symbol="🐉", color="#ff8c3a"),
    Hero(name="Jackpot Jackal", symbol="🎰", color="#e244ff"),
)


def select_heroes(pair_count: int) -> Sequence[Hero]:
    """取前 pair_count 位英雄（每位英雄對應一組牌）"""
    return HEROES[:pair_count]


def shuffle(tiles: List[Tile], rng: Optional[random.Random] = None) -> List[Tile]:
    """
    Fisher-Yates 洗牌（原地）

    從最後一個位置往前，每個位置 i 和 [0, i] 內均勻選出的位置交換，
    所以 (2K)! 種排列出現機率相同。

    參數：
        tiles: 要洗的牌（會被原地修改）
        rng: 亂數來源，測試時可以傳入固定 seed 的 Random

    返回：
        同一個 list（方便串接）
    """
    rng = rng or random
    for i in range(len(tiles) - 1, 0, -1):
        j = rng.randint(0, i)
        tiles[i], tiles[j] = tiles[j], tiles[i]
    return tiles


def _new_tile_id(rng, used_ids) -> str:
    """不透明的牌 id，和英雄、位置都無關"""
    while True:
        tile_id = f"{rng.getrandbits(64):016x}"
        if tile_id not in used_ids:
            used_ids.add(tile_id)
            return tile_id


def generate_deck(heroes: Sequence[Hero], rng: Optional[random.Random] = None) -> List[Tile]:
    """
    為每位英雄建立兩張牌，然後洗牌

    注意：
        - 牌的 id 是隨機的 16 位 hex，不帶英雄名稱，蓋著的牌無法從 id 看出配對
        - pair_key 就是英雄名稱

    參數：
        heroes: K 位不重複的英雄
        rng: 亂數來源

    返回：
        2K 張牌，每個 pair_key 剛好出現兩次
    """
    rng = rng or random
    used_ids = set()
    tiles = []
    for hero in heroes:
        for _ in range(2):
            tiles.append(Tile(
                id=_new_tile_id(rng, used_ids),
                pair_key=hero.name,
                face_symbol=hero.symbol,
                color=hero.color,
            ))
    return shuffle(tiles, rng)
