# src/pagetrans/core/exceptions.py
"""
本模块定义了 PageTrans 项目中所有自定义的、语义化的异常类型。

使用自定义异常可以使错误处理更加精确和清晰，方便上层调用者根据
不同的错误类型执行不同的处理逻辑：
- 客户端错误（校验失败、文档不存在、页面无文本）由请求编排层就地转换为结构化响应；
- 翻译与持久化错误向上传播，只有队列 Worker 会在重新抛出前将其记录到 Job 上。
"""


class PageTransError(Exception):
    """
    所有 PageTrans 自定义异常的通用基类。
    捕获此异常可以处理所有源自本项目的预期错误。
    """


class ConfigurationError(PageTransError):
    """表示在加载、解析或验证配置时发生的错误。"""


class EngineNotFoundError(PageTransError, KeyError):
    """
    表示尝试访问一个未注册或不可用的翻译引擎时引发的错误。
    继承自 KeyError 是为了保持与字典查找行为的一致性。
    """


class ClientRequestError(PageTransError):
    """由调用方输入导致的错误，不应重试。`error_code` 与 `status_code` 供上层映射响应。"""

    error_code = "bad_request"
    status_code = 400


class ValidationError(ClientRequestError):
    """缺失或非法的请求参数（文档标识、页码、目标语言）。"""

    error_code = "validation"
    status_code = 400


class DocumentNotFoundError(ClientRequestError):
    """被引用的文档不存在。"""

    error_code = "not_found"
    status_code = 404


class EmptyContentError(ClientRequestError):
    """页面上没有可提取的文本。"""

    error_code = "empty_content"
    status_code = 404


class APIError(PageTransError):
    """
    表示与外部翻译服务交互时发生的错误。
    例如，网络问题或服务返回错误状态码。
    """


class TransientTranslationError(APIError):
    """AI 翻译调用失败或超时；可由队列传输层的重试策略再次尝试。"""


class PersistenceError(PageTransError):
    """
    表示在持久化层操作（如数据库连接、查询）中发生的错误。
    通常是底层数据库驱动异常的包装。
    """


class InvalidJobTransitionError(PageTransError):
    """试图让一个 Job 离开终态，或执行状态机不允许的迁移。"""
