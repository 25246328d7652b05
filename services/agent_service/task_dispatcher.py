# task_dispatcher.py - Core execution engine for agent runs
# This file contains the logic for running an agent's tasks in order and aggregating their results.

import logging
import time
from typing import List

from .models import (
    Agent, AgentResult, AgentRunPlan, RunStatus, Task, TaskPlanEntry,
    TaskResult, TaskStatus
)
from .task_types.registry import TaskHandlerRegistry

logger = logging.getLogger(__name__)

# Output recorded for a task whose executor raised
FAILED_TASK_OUTPUT = "[]"

class TaskDispatcher:
    """Runs an agent's tasks one at a time, in declaration order.

    A failing task never stops the run. Declared dependencies are not resolved
    and the agent's retry policy is not consulted.
    """

    def __init__(self, registry: TaskHandlerRegistry):
        self.registry = registry

    async def run(self, agent: Agent) -> AgentResult:
        logger.info(f"Starting run of agent {agent.id} ({len(agent.config.tasks)} task(s))")
        start_time = time.monotonic()

        task_results: List[TaskResult] = []
        for task in agent.config.tasks:
            result = await self._run_task(task)
            task_results.append(result)
            logger.info(f"Task {task.id} ({task.name}) finished with status {result.status.value}")

        result = AgentResult(
            agent_id=agent.id,
            status=self.aggregate_status(task_results),
            task_results=task_results,
            duration=int((time.monotonic() - start_time) * 1000),
        )
        logger.info(f"Agent {agent.id} run finished with status: {result.status.value}")
        return result

    async def _run_task(self, task: Task) -> TaskResult:
        executor = self.registry.get_executor(task.type)
        if executor is None:
            logger.info(f"Skipping task {task.id}: type {task.type.value} has no executor")
            return TaskResult(
                task_id=task.id,
                status=TaskStatus.SKIPPED,
                metadata={"reason": f"Task type '{task.type.value}' is not yet implemented"},
            )

        try:
            return await executor.execute(task)
        except Exception as e:
            logger.error(f"Task {task.id} failed: {str(e)}")
            return TaskResult(
                task_id=task.id,
                status=TaskStatus.FAILURE,
                output=FAILED_TASK_OUTPUT,
                error=str(e) or type(e).__name__,
                duration=0,
            )

    @staticmethod
    def aggregate_status(task_results: List[TaskResult]) -> RunStatus:
        successes = sum(1 for r in task_results if r.status == TaskStatus.SUCCESS)
        if successes == len(task_results):
            return RunStatus.SUCCESS
        if successes == 0:
            return RunStatus.FAILURE
        return RunStatus.PARTIAL

    @staticmethod
    def plan(agent: Agent) -> AgentRunPlan:
        """Describe what a run would execute, without invoking any executor."""
        return AgentRunPlan(
            agent_id=agent.id,
            dry_run=True,
            tasks=[
                TaskPlanEntry(
                    position=index,
                    task_id=task.id,
                    name=task.name,
                    type=task.type,
                    description=task.description,
                    dependencies=list(task.dependencies),
                )
                for index, task in enumerate(agent.config.tasks, start=1)
            ],
        )
