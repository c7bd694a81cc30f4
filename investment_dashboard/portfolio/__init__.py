"""Investment records and portfolio analytics."""

from investment_dashboard.portfolio.models import Investment
from investment_dashboard.portfolio.portfolio_service import PortfolioService

__all__ = ["Investment", "PortfolioService"]
