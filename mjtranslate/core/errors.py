from __future__ import annotations

PROVIDER_LABELS = {"deepseek": "DeepSeek", "gemini": "Gemini"}


class TranslationError(Exception):
    """翻译流程中对调用方可见的错误。

    kind 用于区分配置问题(configuration)、输入问题(input)和上游临时问题(upstream)。
    """

    code = "translation_error"
    kind = "upstream"
    default_message = "翻译服务暂时不可用，请稍后再试"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code, "kind": self.kind}


class EmptyInput(TranslationError):
    code = "empty_input"
    kind = "input"
    default_message = "翻译文本不能为空"


class BatchTooLarge(TranslationError):
    code = "batch_too_large"
    kind = "input"
    default_message = "批量翻译最多支持10个文本"


class UnsupportedProvider(TranslationError):
    code = "unsupported_provider"
    kind = "configuration"

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"不支持的翻译提供商: {provider}")


class ProviderError(TranslationError):
    """单个提供商调用失败。provider 为提供商标识(deepseek/gemini)。"""

    code = "provider_error"
    template = "{label}翻译服务暂时不可用，请稍后再试"

    def __init__(self, provider: str, message: str | None = None):
        self.provider = getattr(provider, "value", provider)
        super().__init__(message or self.template.format(label=self.label))

    @property
    def label(self) -> str:
        return PROVIDER_LABELS.get(self.provider, self.provider)


class NotConfigured(ProviderError):
    code = "not_configured"
    kind = "configuration"
    template = "{label} API密钥未配置"


class InvalidCredentials(ProviderError):
    code = "invalid_credentials"
    kind = "configuration"
    template = "{label} API密钥无效或已过期"


class RateLimited(ProviderError):
    code = "rate_limited"
    template = "{label} API调用频率超限，请稍后再试"


class ProviderTimeout(ProviderError):
    code = "timeout"
    template = "{label}翻译服务超时，请稍后再试"


class ProviderUnavailable(ProviderError):
    code = "provider_unavailable"


class MalformedUpstreamResponse(TranslationError):
    # 仅在解析器内部使用，由解析器降级处理，不会传递给调用方
    code = "malformed_upstream_response"
    default_message = "模型返回了非法JSON"


class RecordNotFound(TranslationError):
    code = "not_found"
    kind = "input"
    default_message = "翻译记录不存在"
