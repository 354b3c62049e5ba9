"""
服務層

這個 package 包含純計算邏輯，不負責狀態轉換：
- DeckService：產生並洗牌
- PayoffService：手續費、彩池、倍率、結算計算
- FormattingService：coins / 現金文字格式
"""
