# src/pagetrans/__init__.py
"""
PageTrans：PDF 页面按需翻译。

请求经由 临时缓存 → 持久存储 → AI 翻译 逐层解析；耗时的 AI 调用
通过带去重的任务队列异步执行，任务状态可被观察。
"""

__version__ = "0.1.0"
