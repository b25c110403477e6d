"""CopilotAgent - single-turn AEP assistant with an approval gate for mutating tools.

One call to `process_message` handles one user message:

1. If the caller sends back an approved action, execute it and summarize.
2. Otherwise ask the model, offering every platform tool.
3. If the model picks a tool, either pause for approval (mutating tools) or
   run it and ask the model to interpret the redacted result.

Nothing is persisted between calls; the caller owns the conversation
history and passes it back in on every turn.
"""

import json
import logging
from typing import Optional

from opentelemetry import trace

from aep import AEPClient, AEPConfig
from client import call_llm
from client.types import LLMMessage, LLMMessageRole, LLMProviderConfig, LLMToolCall
from common.types import AgentResponse, ApprovedAction, PendingAction
from tools import ToolDef, build_registry, get_tool_declarations, requires_approval

from .privacy_filter import safe_stringify_for_llm
from .prompts import NO_RESPONSE_MESSAGE, SYSTEM_PROMPT, approval_preview, tool_error_message

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _user(content: str) -> LLMMessage:
    return LLMMessage(role=LLMMessageRole.USER, content=content)


def _assistant(content: str) -> LLMMessage:
    return LLMMessage(role=LLMMessageRole.ASSISTANT, content=content)


class CopilotAgent:
    """Runs one copilot turn against a platform client and an LLM provider.

    The agent is created per turn and owns its AEPClient; use
    `process_message()` for the usual create/run/close sequence.
    """

    def __init__(
        self,
        aep_client: AEPClient,
        llm_config: LLMProviderConfig,
        auto_mode: bool = False,
    ) -> None:
        self.aep_client = aep_client
        self.llm_config = llm_config
        self.auto_mode = auto_mode
        self.tools = build_registry(aep_client)
        self.tool_declarations = get_tool_declarations(self.tools)

    async def run(
        self,
        message: str,
        history: Optional[list[LLMMessage]] = None,
        approved_action: Optional[ApprovedAction] = None,
    ) -> AgentResponse:
        history = list(history or [])
        span = trace.get_current_span()

        if approved_action:
            tool = self.tools.get(approved_action.tool_name)
            if tool:
                span.set_attribute("agent.approval", "approved")
                return await self._execute_approved(tool, approved_action, message, history)
            logger.warning(
                f"Approved action names unknown tool {approved_action.tool_name!r}, "
                "handling message normally"
            )

        messages = history + [_user(message)]
        response = await call_llm(
            self.llm_config, messages, tools=self.tool_declarations, system_prompt=SYSTEM_PROMPT
        )

        tool_call = response.first_tool_call
        if tool_call:
            return await self._handle_tool_call(tool_call, messages)

        return AgentResponse(content=response.text or NO_RESPONSE_MESSAGE, tools_used=[])

    async def _execute_approved(
        self,
        tool: ToolDef,
        action: ApprovedAction,
        message: str,
        history: list[LLMMessage],
    ) -> AgentResponse:
        logger.info(f"Executing approved tool: {tool.name}")
        trace.get_current_span().set_attribute("agent.tool", tool.name)

        result = await tool.run(action.tool_arguments)
        safe_result = safe_stringify_for_llm(result)

        summary_messages = history + [
            _user(message),
            _assistant(f"I executed {tool.name} and got the following result:"),
            _user(
                f"Tool result for {tool.name}: {safe_result}\n\n"
                "Please summarize this result for the user."
            ),
        ]
        summary = await call_llm(self.llm_config, summary_messages, system_prompt=SYSTEM_PROMPT)

        return AgentResponse(content=summary.text or safe_result, tools_used=[tool.name], data=result)

    async def _handle_tool_call(
        self, tool_call: LLMToolCall, messages: list[LLMMessage]
    ) -> AgentResponse:
        span = trace.get_current_span()
        span.set_attribute("agent.tool", tool_call.name)

        tool = self.tools.get(tool_call.name)
        if not tool:
            logger.warning(f"Model requested unknown tool: {tool_call.name}")
            return AgentResponse(content=f"Unknown tool: {tool_call.name}", tools_used=[])

        if requires_approval(self.tools, tool.name) and not self.auto_mode:
            logger.info(f"Tool {tool.name} requires approval, pausing")
            span.set_attribute("agent.approval", "pending")
            return AgentResponse(
                content=approval_preview(tool.name, json.dumps(tool_call.args, indent=2)),
                tools_used=[],
                requires_approval=True,
                pending_action=PendingAction(
                    tool_name=tool.name,
                    tool_arguments=tool_call.args,
                    description=tool.description,
                ),
            )

        logger.info(f"Executing tool: {tool.name}")
        try:
            result = await tool.run(tool_call.args)
        except Exception as e:
            logger.warning(f"Tool {tool.name} failed: {e}")
            span.set_attribute("agent.tool_error", True)
            return AgentResponse(content=tool_error_message(tool.name, str(e)), tools_used=[tool.name])

        safe_result = safe_stringify_for_llm(result)
        followup_messages = messages + [
            _assistant(f"I'll use the {tool.name} tool to help with that."),
            _user(
                f'Tool "{tool.name}" returned:\n{safe_result}\n\n'
                "Please interpret this result and provide a helpful summary."
            ),
        ]
        interpretation = await call_llm(
            self.llm_config, followup_messages, system_prompt=SYSTEM_PROMPT
        )

        return AgentResponse(
            content=interpretation.text or safe_result, tools_used=[tool.name], data=result
        )


async def process_message(
    message: str,
    aep_config: AEPConfig,
    llm_config: LLMProviderConfig,
    history: Optional[list[LLMMessage]] = None,
    auto_mode: bool = False,
    approved_action: Optional[ApprovedAction] = None,
) -> AgentResponse:
    """Handle one user message end to end. Never raises.

    Any failure outside tool execution (bad credentials, provider errors,
    unsupported provider) is reported as "Error: <message>".
    """
    with tracer.start_as_current_span("agent.process_message") as span:
        span.set_attribute("llm.provider", llm_config.provider)
        span.set_attribute("agent.auto_mode", auto_mode)
        try:
            async with AEPClient(aep_config) as aep_client:
                agent = CopilotAgent(aep_client, llm_config, auto_mode=auto_mode)
                return await agent.run(message, history=history, approved_action=approved_action)
        except Exception as e:
            logger.error(f"Copilot turn failed: {e}", exc_info=True)
            span.record_exception(e)
            return AgentResponse(content=f"Error: {e}", tools_used=[])

