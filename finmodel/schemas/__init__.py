from .financials import FinancialDataCreate
from .decisions import DecisionCreate
from .agent_logs import AgentLogCreate
