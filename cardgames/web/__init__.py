# 浏览器界面模块（本地单人对局）
