"""Доступ к истории транзакций Solana и проверке подписей."""
