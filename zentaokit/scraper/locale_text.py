from __future__ import annotations

"""Source-language literals matched against scraped Zentao pages.

Every piece of text the parsers compare against lives here. The tables below
describe a server running with ``lang=zh-cn`` (the language requested by the
cookie header); a differently localised server needs a different table.
"""

# Task status cell text -> TaskStatus value.
TASK_STATUS_TEXT: dict[str, str] = {
    "未开始": "wait",
    "进行中": "doing",
    "已完成": "done",
    "已暂停": "pause",
    "已取消": "cancel",
    "已关闭": "closed",
}

BUG_STATUS_TEXT: dict[str, str] = {
    "激活": "active",
    "已解决": "resolved",
    "已关闭": "closed",
}

BUG_TYPE_TEXT: dict[str, str] = {
    "代码错误": "codeerror",
    "界面优化": "interface",
    "配置相关": "config",
    "安装部署": "install",
    "安全相关": "security",
    "性能问题": "performance",
    "标准规范": "standard",
    "测试脚本": "automation",
    "设计缺陷": "designdefect",
    "其他": "others",
}

BUG_RESOLUTION_TEXT: dict[str, str] = {
    "已解决": "fixed",
    "不予解决": "wontfix",
    "外部原因": "external",
    "重复Bug": "duplicate",
    "无法重现": "notrepro",
    "延期处理": "postponed",
    "设计如此": "bydesign",
    "无需修复": "willnotfix",
    "转为需求": "tostory",
    "转为研发需求": "tostory",
}

# Marker shown in the confirmation cell of unconfirmed bugs.
UNCONFIRMED_MARKER = "未确认"

# Separator between a user and a timestamp, e.g. "admin 于 2024-05-01 10:00".
ACTOR_DATE_SEPARATOR = "于"

# Keywords classifying a narrative section title inside the steps block.
SECTION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "steps": ("步骤",),
    # Checked before "result" so "[期望结果]" is the expected section.
    "expected": ("期望",),
    "result": ("结果",),
}

# Heading of the detail block holding the reproduction steps.
STEPS_BLOCK_TITLE = "重现步骤"

# Labels of the <th> cells on detail pages, one tuple of aliases per field.
TASK_DETAIL_LABELS: dict[str, tuple[str, ...]] = {
    "project": ("所属项目", "所属执行"),
    "status": ("任务状态",),
    "priority": ("优先级",),
    "assigned_to": ("指派给",),
    "deadline": ("截止日期",),
    "estimated_start": ("预计开始",),
    "actual_start": ("实际开始",),
    "estimate": ("最初预计", "预计工时"),
    "consumed": ("总计消耗", "总消耗"),
    "left": ("预计剩余",),
}

BUG_DETAIL_LABELS: dict[str, tuple[str, ...]] = {
    "product": ("所属产品",),
    "module": ("所属模块",),
    "plan": ("所属计划",),
    "from_case": ("来源用例",),
    "type": ("Bug类型", "类型"),
    "severity": ("严重程度",),
    "priority": ("优先级",),
    "status": ("Bug状态", "状态"),
    "activated_count": ("激活次数",),
    "activated_date": ("激活日期",),
    "confirmed": ("是否确认",),
    "assigned_info": ("当前指派",),
    "deadline": ("截止日期",),
    "feedback_by": ("反馈者",),
    "notify_email": ("通知邮箱",),
    "os": ("操作系统",),
    "browser": ("浏览器",),
    "keywords": ("关键词",),
    "mailto": ("抄送给",),
    "opened_info": ("由谁创建",),
    "resolved_info": ("由谁解决",),
    "resolution": ("解决方案",),
    "closed_info": ("由谁关闭",),
}

# Placeholder used when an embedded image cannot be inlined.
IMAGE_FALLBACK_TEMPLATE = "[📷 图片链接]({url})"


__all__ = [
    "TASK_STATUS_TEXT",
    "BUG_STATUS_TEXT",
    "BUG_TYPE_TEXT",
    "BUG_RESOLUTION_TEXT",
    "UNCONFIRMED_MARKER",
    "ACTOR_DATE_SEPARATOR",
    "SECTION_KEYWORDS",
    "STEPS_BLOCK_TITLE",
    "TASK_DETAIL_LABELS",
    "BUG_DETAIL_LABELS",
    "IMAGE_FALLBACK_TEMPLATE",
]
