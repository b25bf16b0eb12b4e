"""
Assessment 도메인 - 시험 응시(attempt) 생명주기 규칙 (순수 파이썬)
"""
