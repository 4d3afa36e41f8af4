"""Trainer earnings ledger and withdrawal service"""
