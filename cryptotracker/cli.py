"""
Command line front end.

Usage:
    cryptotracker                              # Statistics, coins and portfolio
    cryptotracker --search eth --sort price    # Filter and sort the coin list
    cryptotracker --set-holding bitcoin 0.5    # Update a portfolio holding
    cryptotracker --detail ethereum            # Coin detail statistics
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import List, Optional

from .config import load_config
from .data import CoinGeckoClient
from .models import Coin, Statistic
from .pipeline import DetailViewModel, HomeViewModel, SortOption
from .reactive import ImmediateScheduler


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Crypto Tracker"
    )

    parser.add_argument(
        '--config',
        type=str,
        default='config/config.yaml',
        help='Path to configuration file'
    )

    parser.add_argument(
        '--search',
        type=str,
        default='',
        help='Filter coins by name, symbol or id'
    )

    parser.add_argument(
        '--sort',
        type=str,
        choices=[option.value for option in SortOption],
        help='Sort order'
    )

    parser.add_argument(
        '--limit',
        type=int,
        default=20,
        help='Number of coins to show'
    )

    parser.add_argument(
        '--set-holding',
        nargs=2,
        metavar=('COIN_ID', 'AMOUNT'),
        help='Set the held amount of a coin (0 removes it)'
    )

    parser.add_argument(
        '--detail',
        type=str,
        metavar='COIN_ID',
        help='Show detail statistics for a coin'
    )

    parser.add_argument(
        '--format',
        type=str,
        choices=['table', 'json'],
        default='table',
        help='Output format'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser.parse_args(argv)


def find_coin(coins: List[Coin], coin_id: str) -> Optional[Coin]:
    for coin in coins:
        if coin.id == coin_id:
            return coin
    return None


def format_statistic(stat: Statistic) -> str:
    line = f"  {stat.title:22s} {stat.value:>20s}"
    if stat.percentage_change is not None:
        line += f"  ({stat.percentage_change:+.2f}%)"
    return line


def print_home(view_model: HomeViewModel, limit: int) -> None:
    print("\nMARKET")
    print("-" * 60)
    for stat in view_model.statistics.value:
        print(format_statistic(stat))

    print(f"\nCOINS (sort: {view_model.sort_option.value.value})")
    print("-" * 60)
    for coin in view_model.all_coins.value[:limit]:
        change = coin.price_change_percentage_24h or 0.0
        print(f"  {coin.rank:4d}  {coin.symbol.upper():8s} "
              f"${coin.current_price:>15,.2f} ({change:+.2f}%)")

    print("\nPORTFOLIO")
    print("-" * 60)
    portfolio = view_model.portfolio_coins.value
    if not portfolio:
        print("  (empty)")
    for coin in portfolio:
        print(f"  {coin.symbol.upper():8s} {coin.current_holdings:>14,.6f}  "
              f"${coin.current_holdings_value:>15,.2f}")


def print_detail(view_model: DetailViewModel) -> None:
    coin = view_model.coin.value
    print(f"\n{coin.name} ({coin.symbol.upper()})")
    print("-" * 60)
    print("Overview")
    for stat in view_model.overview_statistics.value:
        print(format_statistic(stat))
    print("Additional Details")
    for stat in view_model.additional_statistics.value:
        print(format_statistic(stat))

    if view_model.coin_description.value:
        print(f"\n{view_model.coin_description.value}")
    if view_model.website_url.value:
        print(f"\nWebsite: {view_model.website_url.value}")
    if view_model.reddit_url.value:
        print(f"Reddit: {view_model.reddit_url.value}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Load configuration
    config = load_config(args.config)

    # Set logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    client = CoinGeckoClient.from_config(config)
    view_model = HomeViewModel.from_config(config, client=client, scheduler=ImmediateScheduler())

    if args.sort:
        view_model.sort_option.value = SortOption(args.sort)
    if args.search:
        view_model.search_text.value = args.search

    coins = view_model.coin_service.all_coins.value
    if not coins:
        print("No market data available. Check your connection and try again.")
        return 1

    if args.set_holding:
        coin_id, amount_text = args.set_holding
        coin = find_coin(coins, coin_id)
        if coin is None:
            print(f"Unknown coin: {coin_id}")
            return 1
        try:
            amount = float(amount_text)
            view_model.update_portfolio(coin, amount)
        except ValueError as e:
            print(f"Invalid amount: {amount_text} ({e})")
            return 1

    if args.detail:
        coin = find_coin(coins, args.detail)
        if coin is None:
            print(f"Unknown coin: {args.detail}")
            return 1
        detail = DetailViewModel.for_coin(coin, client)
        if args.format == 'json':
            print(json.dumps({
                'id': coin.id,
                'overview': [s.to_dict() for s in detail.overview_statistics.value],
                'additional': [s.to_dict() for s in detail.additional_statistics.value],
                'description': detail.coin_description.value,
                'website': detail.website_url.value,
                'reddit': detail.reddit_url.value
            }, indent=2))
        else:
            print_detail(detail)
        return 0

    if args.format == 'json':
        print(json.dumps({
            'generated_at': datetime.now().isoformat(),
            'statistics': [s.to_dict() for s in view_model.statistics.value],
            'coins': [
                {'id': c.id, 'symbol': c.symbol, 'rank': c.rank, 'price': c.current_price}
                for c in view_model.all_coins.value[:args.limit]
            ],
            'portfolio': [
                {'id': c.id, 'amount': c.current_holdings, 'value': c.current_holdings_value}
                for c in view_model.portfolio_coins.value
            ]
        }, indent=2))
    else:
        print(f"\n{'='*60}")
        print("CRYPTO TRACKER")
        print(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print(f"{'='*60}")
        print_home(view_model, args.limit)

    return 0


if __name__ == '__main__':
    sys.exit(main())
