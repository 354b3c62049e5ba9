"""
核心業務邏輯層

這個 package 包含所有有狀態的業務邏輯，包括：
- 狀態機：集中管理回合狀態轉換
- GameSession：回合生命週期、延遲比對、錢包操作
- SessionManager：管理玩家 Session
- Ledger / Event Log：帳本與事件紀錄
- Scheduler / Locks：延遲任務與並發控制工具
"""
